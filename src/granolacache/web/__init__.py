"""HTTP interface exposing the query API."""
