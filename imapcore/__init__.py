"""IMAP protocol building blocks: wire encoder and decoder, sequence sets, modified UTF-7, SASL framing and command data types."""

__version__ = "0.1.0"