"""netero: a terminal assistant with inline shell commands and streaming chat."""
