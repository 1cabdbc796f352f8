"""
Live preview assembly and screenshot capture using Playwright.

The preview buffer is always static HTML. It is embedded into a shell page
that loads Tailwind, Lucide icons and the Inter font, the same way the browser
preview frame shows it.
"""

import asyncio
from pathlib import Path
from typing import Dict, Optional, Union

from bs4 import BeautifulSoup, Doctype
from playwright.async_api import async_playwright

from napkin2web.models import PreviewDevice, ViewportConfig


PREVIEW_SHELL = """<!DOCTYPE html>
<html class="h-full">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <script src="https://cdn.tailwindcss.com"></script>
    <script src="https://unpkg.com/lucide@latest"></script>
    <link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap" rel="stylesheet">
    <style>
      body {{
        font-family: 'Inter', sans-serif;
        margin: 0;
        min-height: 100vh;
        display: flex;
        justify-content: center;
        align-items: center;
        background-color: #020617;
        color: white;
      }}
      ::-webkit-scrollbar {{ width: 8px; }}
      ::-webkit-scrollbar-track {{ background: #0f172a; }}
      ::-webkit-scrollbar-thumb {{ background: #334155; border-radius: 4px; }}
      ::-webkit-scrollbar-thumb:hover {{ background: #475569; }}
    </style>
  </head>
  <body>
    <div class="w-full flex justify-center items-center py-12 px-4">
      {content}
    </div>
    <script>
      lucide.createIcons();
    </script>
  </body>
</html>
"""


def extract_body_markup(code: str) -> str:
    """
    Get the embeddable markup of a preview document.

    Full documents contribute the inner HTML of their <body>. Otherwise the
    <html>, <head> and doctype wrappers are dropped and the rest is kept.
    """
    if not code:
        return ""

    soup = BeautifulSoup(code, "html.parser")
    body = soup.find("body")
    if body is not None:
        return body.decode_contents().strip()

    for head in soup.find_all("head"):
        head.decompose()
    for node in list(soup.contents):
        if isinstance(node, Doctype):
            node.extract()
    html = soup.find("html")
    if html is not None:
        html.unwrap()

    return str(soup).strip()


def build_preview_document(preview_code: Optional[str], fallback_code: Optional[str] = None) -> str:
    """
    Build the full HTML document shown in the preview frame.

    Args:
        preview_code: Static HTML preview buffer.
        fallback_code: Used when no preview buffer exists yet.

    Returns:
        Standalone HTML document.
    """
    source = preview_code or fallback_code or ""
    return PREVIEW_SHELL.format(content=extract_body_markup(source))


class PreviewRenderer:
    """Renders preview documents and captures screenshots per device."""

    def __init__(
        self,
        headless: bool = True,
        browser_type: str = "chromium"
    ):
        """
        Initialize the renderer.

        Args:
            headless: Whether to run browser in headless mode.
            browser_type: Browser to use (chromium, firefox, webkit).
        """
        self.headless = headless
        self.browser_type = browser_type

    async def _launch(self, p):
        if self.browser_type == "chromium":
            return await p.chromium.launch(headless=self.headless)
        elif self.browser_type == "firefox":
            return await p.firefox.launch(headless=self.headless)
        elif self.browser_type == "webkit":
            return await p.webkit.launch(headless=self.headless)
        raise ValueError(f"Unsupported browser: {self.browser_type}")

    async def render_devices_async(
        self,
        preview_code: str,
        output_dir: Path,
        devices=tuple(PreviewDevice),
        wait_time: int = 1000
    ) -> Dict[PreviewDevice, Path]:
        """
        Render the preview at several device sizes (async).

        Args:
            preview_code: Static HTML preview buffer.
            output_dir: Directory for preview.html and screenshots.
            devices: Devices to render.
            wait_time: Time to wait for CDN scripts to style the page (ms).

        Returns:
            Mapping of device to screenshot path.
        """
        output_dir.mkdir(parents=True, exist_ok=True)
        html_path = output_dir / "preview.html"
        html_path.write_text(build_preview_document(preview_code), encoding="utf-8")
        html_url = f"file://{html_path.absolute()}"

        screenshot_paths = {}

        async with async_playwright() as p:
            browser = await self._launch(p)

            for device in devices:
                viewport = ViewportConfig.for_device(PreviewDevice(device))
                context = await browser.new_context(
                    viewport={
                        "width": viewport.width,
                        "height": viewport.height
                    },
                    device_scale_factor=1
                )

                page = await context.new_page()
                await page.goto(html_url, wait_until="networkidle")
                await page.wait_for_timeout(wait_time)

                screenshot_path = output_dir / f"{viewport.device.value}.png"
                await page.screenshot(path=str(screenshot_path), full_page=True)
                screenshot_paths[viewport.device] = screenshot_path

                await context.close()

            await browser.close()

        return screenshot_paths

    def render_devices(
        self,
        preview_code: str,
        output_dir: Union[str, Path],
        devices=tuple(PreviewDevice),
        wait_time: int = 1000
    ) -> Dict[PreviewDevice, Path]:
        """Render the preview at several device sizes (sync wrapper)."""
        return asyncio.run(
            self.render_devices_async(preview_code, Path(output_dir), devices, wait_time)
        )
