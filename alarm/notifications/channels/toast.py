"""
PowerShell toast payload, shared by the Windows and WSL channels.

The BurntToast module is used when installed; otherwise the script talks to
the WinRT ToastNotificationManager directly with an XML template. The XML
template is a single-quoted here-string, so PowerShell never expands `$`
inside notification text.
"""

from __future__ import annotations

import re

from alarm.core.text import escape_powershell_single_quoted, escape_xml

DEFAULT_APP_ID = "Claude Code"

# A line starting with any of these followed by @ would close the here-string.
_HERE_STRING_QUOTES = re.compile("[\u2018\u2019\u201a\u201b]")


def _xml_text(text: str) -> str:
    return _HERE_STRING_QUOTES.sub(lambda m: f"&#x{ord(m.group()):04x};", escape_xml(text))


def build_toast_script(title: str, message: str, app_id: str = DEFAULT_APP_ID) -> str:
    ps_title = escape_powershell_single_quoted(title)
    ps_message = escape_powershell_single_quoted(message)
    ps_app_id = escape_powershell_single_quoted(app_id)
    xml_title = _xml_text(title)
    xml_message = _xml_text(message)

    return f"""
if (Get-Module -ListAvailable -Name BurntToast) {{
  New-BurntToastNotification -Text '{ps_title}', '{ps_message}'
}} else {{
  [Windows.UI.Notifications.ToastNotificationManager, Windows.UI.Notifications, ContentType = WindowsRuntime] | Out-Null
  [Windows.Data.Xml.Dom.XmlDocument, Windows.Data.Xml.Dom.XmlDocument, ContentType = WindowsRuntime] | Out-Null

  $template = @'
<toast>
  <visual>
    <binding template="ToastGeneric">
      <text>{xml_title}</text>
      <text>{xml_message}</text>
    </binding>
  </visual>
</toast>
'@

  $xml = New-Object Windows.Data.Xml.Dom.XmlDocument
  $xml.LoadXml($template)
  $toast = [Windows.UI.Notifications.ToastNotification]::new($xml)
  [Windows.UI.Notifications.ToastNotificationManager]::CreateToastNotifier('{ps_app_id}').Show($toast)
}}
""".strip()
