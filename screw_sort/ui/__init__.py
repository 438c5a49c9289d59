"""pygame front-end: rendering, audio and input adapters."""
