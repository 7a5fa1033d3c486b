"""Pure domain layer: calendar arithmetic, window computation, value objects."""
