"""Plain-text rendering shared by text-based notification adapters."""

from shopcast.core.models import NotificationContent


def render_markdown(content: NotificationContent) -> str:
    """Render content as chat-flavoured markdown.

    Title in bold, then the body, then one ``- **label**: value`` line per
    structured field.
    """
    lines = [f"**{content.title}**", content.body]
    if content.fields:
        lines.append("")
        lines.extend(f"- **{label}**: {value}" for label, value in content.fields)
    return "\n".join(lines)


def render_plain(content: NotificationContent) -> str:
    """Render content for terminals, without markdown emphasis."""
    lines = [content.title, "-" * 60, content.body.replace("**", "")]
    if content.fields:
        lines.append("")
        width = max(len(label) for label, _ in content.fields)
        lines.extend(f"{label.ljust(width)}  {value}" for label, value in content.fields)
    return "\n".join(lines)
