"""
SignSense - Sign-to-Text Recognition Core
=========================================

Rule-based recognition of signed words and ASL letters from 21-point hand
landmarks, with temporal smoothing and a debounced text output.

Modules:
    - core: domain types, event bus, recognition pipeline
    - detection: landmark validation and the MediaPipe Hands wrapper
    - recognition: geometry primitives, gesture rules, temporal filter
    - output: recognized-text transcript
    - intelligence: session analytics
    - utils: configuration and logging
"""

__version__ = "1.0.0"
