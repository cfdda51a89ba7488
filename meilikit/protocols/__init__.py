"""Protocol definitions for pluggable meilikit collaborators."""

from meilikit.protocols.transport import TransportProtocol

__all__ = ["TransportProtocol"]
