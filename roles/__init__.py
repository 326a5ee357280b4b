"""Built-in role entry points — import all to register via @role_entry."""

# Importing sub-modules triggers @role_entry decorators, populating the registry.
from roles import describe_config  # noqa: F401
