"""
Core infrastructure for xi-tts.

    - config.py: Defaults, ClientConfig, YAML settings loading
    - logging/: Structured logging with numeric levels
"""
