"""Engine-independent building blocks: configuration schemas and chess rules."""
