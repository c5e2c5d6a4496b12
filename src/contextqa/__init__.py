"""contextqa: grounded question answering over stored reference contexts."""
