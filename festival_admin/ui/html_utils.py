"""Utilities for preparing HTML snippets before rendering in Streamlit."""
from html import escape
from textwrap import dedent


def html_block(template: str) -> str:
    """
    Normalize multi-line HTML so Streamlit doesn't treat it as Markdown code.

    Streamlit's Markdown renderer interprets lines with >=4 leading spaces as
    code blocks. We dedent and strip leading whitespace on each line to avoid
    that while keeping the markup intact.
    """
    lines = dedent(template).splitlines()
    return "\n".join(line.lstrip() for line in lines).strip()


def render_speaker_avatar(image_url: str, speaker_name: str, size: int = 100) -> str:
    """Circular speaker photo with an initial shown when the image is missing."""
    initial = speaker_name.strip()[:1].upper() if speaker_name and speaker_name.strip() else "?"
    safe_name = escape(speaker_name or "", quote=True)
    fallback = html_block(
        f"""
        <div style="width: {size}px; height: {size}px; border-radius: 50%;
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            display: flex; align-items: center; justify-content: center;
            color: #ffffff; font-weight: 700; font-size: {size // 2}px;">{escape(initial)}</div>
        """
    )
    if not image_url:
        return fallback

    safe_url = escape(image_url, quote=True)
    return html_block(
        f"""
        <div style="position: relative; width: {size}px; height: {size}px;">
        <img src="{safe_url}" alt="{safe_name}"
            style="width: {size}px; height: {size}px; border-radius: 50%; object-fit: cover;"
            onerror="this.style.display='none'; this.nextElementSibling.style.display='flex';" />
        <div style="display: none; position: absolute; top: 0; left: 0; width: {size}px; height: {size}px;
            border-radius: 50%; background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            align-items: center; justify-content: center; color: #ffffff; font-weight: 700;
            font-size: {size // 2}px;">{escape(initial)}</div>
        </div>
        """
    )
