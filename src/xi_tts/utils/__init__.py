"""
Utility modules:
    - audio.py: WAV wrapping for pcm/ulaw responses
    - timeit.py: round-trip timing
"""
