"""Shared HTML shell for club notification emails."""
from html import escape
from urllib.parse import quote

STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background-color: #dc2626; color: white; padding: 20px; text-align: center; }
    .content { padding: 20px; background-color: #f9f9f9; }
    .carpool-info { background-color: white; padding: 15px; margin: 15px 0; border-left: 4px solid #dc2626; }
    .rider-list { list-style: none; padding: 0; }
    .rider-list li { padding: 8px; background-color: #f3f4f6; margin: 5px 0; border-radius: 4px; }
    .footer { text-align: center; padding: 20px; color: #666; font-size: 12px; }
"""


def mailto(address: str) -> str:
    return f'<a href="mailto:{quote(address, safe="@")}">{escape(address)}</a>'


def tel(number: str) -> str:
    return f'<a href="tel:{quote(number, safe="+")}">{escape(number)}</a>'


def render_page(club_name: str, heading: str, body: str, reply_to: str) -> str:
    club = escape(club_name)
    contact = f" or contact us at {escape(reply_to)}" if reply_to else ""
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <style>{STYLE}</style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h1>{club}</h1>
      <h2>{escape(heading)}</h2>
    </div>
    <div class="content">
{body}
    </div>
    <div class="footer">
      <p>{club}</p>
      <p>Questions? Reply to this email{contact}</p>
    </div>
  </div>
</body>
</html>"""
