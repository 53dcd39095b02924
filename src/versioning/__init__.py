"""Version specifier parsing and resolution."""
