"""Art-Net and sACN DMX decoding, report model and PCAPNG fixture writing."""

__version__ = "0.1.0"
__all__ = ["artnet", "common", "fixtures", "report", "sacn", "sacn_reader"]