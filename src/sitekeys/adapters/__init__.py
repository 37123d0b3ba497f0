"""Front-ends built on top of the compiler."""
