"""
Sandboxed live preview of a generated document.
"""

import html

# Scripts, forms and popups run inside the frame. Without allow-same-origin and
# allow-top-navigation the document cannot reach the host page or navigate it.
PREVIEW_SANDBOX = "allow-scripts allow-forms allow-popups"

DEFAULT_PREVIEW_HEIGHT = 500


def build_preview_frame(code: str, height: int = DEFAULT_PREVIEW_HEIGHT) -> str:
    """
    Wrap an HTML document in a sandboxed iframe.

    Args:
        code: Complete HTML document, embedded unchanged via `srcdoc`.
        height: Frame height in pixels.

    Returns:
        HTML snippet containing the iframe.
    """
    return (
        f'<iframe srcdoc="{html.escape(code, quote=True)}" '
        f'title="Generated App Preview" '
        f'sandbox="{PREVIEW_SANDBOX}" '
        f'style="width: 100%; height: {height}px; border: 1px solid #e5e7eb; '
        f'border-radius: 0.5rem; background: #ffffff;"></iframe>'
    )
