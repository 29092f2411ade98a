"""
Inline image output for terminals.

Supports the kitty graphics protocol (kitty, Ghostty, WezTerm in kitty mode)
and the iTerm2 inline file protocol (iTerm2, WezTerm). Terminals without
either report available() == False so callers can fail instead of printing
escape-sequence garbage.
"""

import base64
import io
import os
from typing import Mapping, Optional, TextIO

from PIL import Image

from ..config_constants import GraphicsProtocol
from ..domain.errors import TerminalGraphicsUnavailableError

# kitty requires payload chunks of at most 4096 bytes
KITTY_CHUNK_SIZE = 4096

ESC = "\x1b"
BEL = "\x07"
ST = f"{ESC}\\"


def detect_protocol(environ: Optional[Mapping[str, str]] = None) -> GraphicsProtocol:
    """Guess the inline image protocol from terminal environment variables."""
    env = os.environ if environ is None else environ
    term = env.get("TERM", "")
    term_program = env.get("TERM_PROGRAM", "")

    if env.get("KITTY_WINDOW_ID") or term == "xterm-kitty" or term_program == "ghostty":
        return GraphicsProtocol.KITTY
    if term_program in ("iTerm.app", "WezTerm") or env.get("LC_TERMINAL") == "iTerm2":
        return GraphicsProtocol.ITERM
    return GraphicsProtocol.NONE


def _png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def encode_kitty(png: bytes) -> str:
    payload = base64.standard_b64encode(png).decode("ascii")
    chunks = [payload[i:i + KITTY_CHUNK_SIZE] for i in range(0, len(payload), KITTY_CHUNK_SIZE)] or [""]

    parts = []
    for index, chunk in enumerate(chunks):
        more = 1 if index < len(chunks) - 1 else 0
        control = f"a=T,f=100,m={more}" if index == 0 else f"m={more}"
        parts.append(f"{ESC}_G{control};{chunk}{ST}")
    return "".join(parts) + "\n"


def encode_iterm(png: bytes) -> str:
    payload = base64.standard_b64encode(png).decode("ascii")
    return f"{ESC}]1337;File=inline=1;size={len(png)};preserveAspectRatio=1:{payload}{BEL}\n"


class TerminalGraphics:
    """
    Terminal capability for inline images.

    Usage:
        graphics = TerminalGraphics(GraphicsProtocol.AUTO)
        if graphics.available():
            graphics.encode(sys.stdout, image)
    """

    def __init__(
        self,
        protocol: GraphicsProtocol = GraphicsProtocol.AUTO,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.protocol = detect_protocol(environ) if protocol == GraphicsProtocol.AUTO else protocol

    def available(self) -> bool:
        return self.protocol in (GraphicsProtocol.KITTY, GraphicsProtocol.ITERM)

    def encode(self, stream: TextIO, image: Image.Image) -> None:
        if not self.available():
            raise TerminalGraphicsUnavailableError("graphics not available")

        png = _png_bytes(image)
        if self.protocol == GraphicsProtocol.KITTY:
            stream.write(encode_kitty(png))
        else:
            stream.write(encode_iterm(png))
        stream.flush()
