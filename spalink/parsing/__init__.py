"""
This package contains all modules related to parsing and decoding data
received from the spa controller.

Sub-packages handle specific data formats:

- ``display``: Seven-segment display frame decoding and sticky status state.
"""
