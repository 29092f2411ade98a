"""
SVG rasterizer using CairoSVG and Pillow.
"""

import io

from PIL import Image

from ..domain.errors import RasterizationError


class SVGRasterizer:
    """
    Converts SVG bytes to an RGB Pillow image.

    gnuplot's default colors assume a light page, so a white background is
    composited under transparent areas.
    """

    def __init__(self, background_color: str = "white"):
        self.background_color = background_color

    def rasterize(self, svg: bytes) -> Image.Image:
        try:
            # cairosvg loads the native cairo library on import
            import cairosvg
        except (ImportError, OSError) as e:
            raise RasterizationError(f"cairosvg is unavailable: {e}") from e

        try:
            png_bytes = cairosvg.svg2png(bytestring=svg, background_color=self.background_color)
            image = Image.open(io.BytesIO(png_bytes))
            image.load()
        except Exception as e:
            raise RasterizationError(f"Failed to rasterize SVG: {e}") from e
        return image.convert("RGB")
