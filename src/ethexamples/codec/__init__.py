"""
Codec - Hand-rolled selector, argument and return-value encoding.

Covers the ``address`` / ``uint256`` call convention used by the example
programs and decoding of ``uint256``, ``address`` and ``string`` returns.
"""
