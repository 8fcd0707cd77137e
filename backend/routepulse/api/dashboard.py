"""HTML dashboard page. Static markup; the browser polls the JSON endpoint for data."""

REFRESH_INTERVAL_MS = 3000
HEALTH_GOOD, HEALTH_WARNING = 80, 60

_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>RoutePulse Dashboard</title>
  <style>
    body { font-family: system-ui, sans-serif; background: #f4f5f7; margin: 0; padding: 24px; color: #222; }
    h1 { margin: 0 0 4px; }
    .subtitle { color: #666; margin-bottom: 24px; }
    .grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(320px, 1fr)); gap: 16px; }
    .card { background: #fff; border-radius: 8px; padding: 16px 20px; box-shadow: 0 1px 3px rgba(0,0,0,0.12); }
    .route { font-weight: 600; border-bottom: 1px solid #eee; padding-bottom: 8px; margin-bottom: 12px; }
    .stats { display: grid; grid-template-columns: 1fr 1fr; gap: 12px; text-align: center; }
    .value { font-size: 1.6em; font-weight: 600; }
    .label { font-size: 0.8em; color: #777; text-transform: uppercase; }
    .good { color: #1e8e3e; }
    .warning { color: #e37400; }
    .danger { color: #d93025; }
    .footer { margin-top: 20px; color: #777; font-size: 0.9em; }
  </style>
</head>
<body>
  <h1>RoutePulse</h1>
  <div class="subtitle">Per-route throughput, latency and health</div>
  <div id="metrics" class="grid"></div>
  <div class="footer">Refreshes every __REFRESH_SECONDS__ s | Last updated: <span id="last-updated">-</span></div>
  <script>
    const API_URL = "__API_URL__";

    function healthClass(health) {
      if (health >= __HEALTH_GOOD__) return "good";
      if (health >= __HEALTH_WARNING__) return "warning";
      return "danger";
    }

    function escapeHtml(text) {
      const div = document.createElement("div");
      div.textContent = text;
      return div.innerHTML;
    }

    function card(m) {
      return `<div class="card">
        <div class="route">${escapeHtml(m.route)}</div>
        <div class="stats">
          <div><div class="value">${m.pulseRate}</div><div class="label">req/s</div></div>
          <div><div class="value">${m.avgResponseTimeMs}ms</div><div class="label">avg time</div></div>
          <div><div class="value ${healthClass(m.health)}">${m.health}%</div><div class="label">health</div></div>
          <div><div class="value">${m.errorRate}%</div><div class="label">errors</div></div>
        </div>
      </div>`;
    }

    async function refresh() {
      try {
        const resp = await fetch(API_URL);
        const data = await resp.json();
        const container = document.getElementById("metrics");
        container.innerHTML = data.metrics.length
          ? data.metrics.map(card).join("")
          : '<div class="card"><h3>No metrics yet</h3><p>Send some requests to see data.</p></div>';
        document.getElementById("last-updated").textContent = new Date().toLocaleTimeString();
      } catch (err) {
        console.error("Failed to load metrics", err);
      }
    }

    refresh();
    setInterval(refresh, __REFRESH_MS__);
  </script>
</body>
</html>
"""


def render_dashboard(api_url: str, refresh_ms: int = REFRESH_INTERVAL_MS) -> str:
    """Return the dashboard page wired to poll `api_url` every `refresh_ms`."""
    replacements = {
        "__API_URL__": api_url,
        "__REFRESH_MS__": str(refresh_ms),
        "__REFRESH_SECONDS__": f"{refresh_ms / 1000:g}",
        "__HEALTH_GOOD__": str(HEALTH_GOOD),
        "__HEALTH_WARNING__": str(HEALTH_WARNING),
    }
    html = _TEMPLATE
    for placeholder, value in replacements.items():
        html = html.replace(placeholder, value)
    return html
