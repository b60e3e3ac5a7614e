"""HTTP interface of the booking engine."""
