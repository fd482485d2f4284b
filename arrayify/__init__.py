"""Turn files into C const char array definitions."""
