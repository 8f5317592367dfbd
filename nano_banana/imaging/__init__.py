"""Request assembly and response interpretation."""
