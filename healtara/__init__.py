"""healtara: healthcare directory with tenant microsites."""
