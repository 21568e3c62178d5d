import re

RELOAD_PATH = "/__hot_reload__"
MARKER = "__hot_reload__"

RELOAD_JS = """
<script>
(function(){
  if (window.__hot_reload__) return;
  window.__hot_reload__ = true;
  const MARKER = '__hot_reload__';
  const basename = (p) => p.split('?')[0].split('#')[0].split(/[\\\\/]+/).pop();

  function reloadCSS(files) {
    const changed = new Set(files.map(basename));
    document.querySelectorAll('link[rel="stylesheet"]').forEach((link) => {
      const href = link.getAttribute('href');
      if (!href || !changed.has(basename(href))) return;
      const url = new URL(href, location.href);
      url.searchParams.set(MARKER, Date.now().toString());
      const fresh = link.cloneNode();
      fresh.href = url.toString();
      fresh.addEventListener('load', () => link.remove());
      fresh.addEventListener('error', () => link.remove());
      link.parentNode.insertBefore(fresh, link.nextSibling);
    });
  }

  function connect() {
    const scheme = location.protocol === 'https:' ? 'wss' : 'ws';
    const ws = new WebSocket(`${scheme}://${location.host}%(path)s`);
    ws.onmessage = (event) => {
      const data = JSON.parse(event.data);
      if (data.type === 'full-reload') location.reload();
      else if (data.type === 'css-change') reloadCSS(data.files || []);
    };
    ws.onclose = () => setTimeout(connect, 1000);
  }
  connect();
})();
</script>
""" % {"path": RELOAD_PATH}

BODY_CLOSE = re.compile(rb"</body\s*>", re.IGNORECASE)
HTML_CLOSE = re.compile(rb"</html\s*>", re.IGNORECASE)


def reload_script() -> str:
    return RELOAD_JS


def _last_match(pattern, data):
    last = None
    for last in pattern.finditer(data):
        pass
    return last


def inject_reload_script(html: bytes) -> bytes:
    """Insert the live-reload client before ``</body>``, ``</html>`` or at the end."""
    if MARKER.encode() in html:
        return html
    script = RELOAD_JS.encode("utf-8")
    match = _last_match(BODY_CLOSE, html) or _last_match(HTML_CLOSE, html)
    if match is None:
        return html + script
    return html[: match.start()] + script + html[match.start():]
