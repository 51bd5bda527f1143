"""HTTP blueprints for the calculators."""
