"""Helper module that takes no part in registration."""

VALUE = "gamma"
