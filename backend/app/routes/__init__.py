"""HTTP routes. Versioned application endpoints live in v1/."""
