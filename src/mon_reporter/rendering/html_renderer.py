from __future__ import annotations

import json

from jinja2 import Template

from mon_reporter.export.csv_exporter import export_csv
from mon_reporter.models import Report, ReportTable
from mon_reporter.rendering.chart_config import chart_config
from mon_reporter.sorting.engine import header_indicator


_HTML_TEMPLATE = """
<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>{{ report.report_title }}</title>
    <style>
      :root {
        --bg: #f1f5ff;
        --card: #ffffff;
        --text: #0f172a;
        --muted: #475569;
        --accent: #0f766e;
        --accent2: #2563eb;
      }
      body { font-family: "Segoe UI", Tahoma, sans-serif; background: var(--bg); color: var(--text); margin: 0; }
      main { max-width: 1120px; margin: 2rem auto; padding: 1rem; }
      section { background: var(--card); border: 1px solid #dbe3ef; border-radius: 16px; box-shadow: 0 16px 36px rgba(15,23,42,0.09); padding: 1rem 1.25rem; margin-bottom: 1rem; }
      h1, h2 { margin: 0 0 0.75rem; }
      .summary { color: var(--muted); }
      .chip { display: inline-block; padding: 0.25rem 0.5rem; border-radius: 999px; background: #dbeafe; color: var(--accent2); margin-right: 0.4rem; font-size: 0.82rem; border: 1px solid #bfdbfe; }
      table { width: 100%; border-collapse: collapse; font-size: 0.92rem; }
      th, td { border-bottom: 1px solid #dbe3ef; padding: 0.45rem; text-align: left; vertical-align: top; }
      th a { color: inherit; text-decoration: none; }
      th.sorttable_sorted, th.sorttable_sorted_reverse { color: var(--accent2); }
      th.sorttable_nosort { color: var(--muted); }
      .table-scroll { overflow: auto; }
      .chart-wrap { border: 1px solid #d9e3f0; border-radius: 12px; padding: 0.6rem; background: #ffffff; height: 340px; overflow: hidden; margin-bottom: 0.8rem; }
      .chart-wrap canvas { width: 100% !important; height: calc(100% - 56px) !important; display: block; }
      .chart-head { display: flex; align-items: center; justify-content: space-between; gap: 0.6rem; margin-bottom: 0.3rem; }
      .chart-title { font-size: 0.9rem; color: var(--muted); font-weight: 600; }
      .chart-export-btn { border: 1px solid #c7d2e3; background: #ffffff; color: #1d4ed8; border-radius: 8px; padding: 0.25rem 0.55rem; font-size: 0.76rem; font-weight: 600; cursor: pointer; }
      .chart-export-btn:hover { background: #eff6ff; border-color: #93c5fd; }
      @media print { .chart-export-btn { display: none !important; } }
    </style>
  </head>
  <body>
    <main>
      <section>
        <h1>{{ report.report_title }}</h1>
        <p class="summary">{{ report.summary }}</p>
        {% for key, value in report.metadata.items() %}
          <span class="chip">{{ key }}: {{ value }}</span>
        {% endfor %}
      </section>

      {% for t in tables %}
      <section>
        <h2>{{ t.title or t.table_id }}</h2>
        {% if t.rows %}
        <div class="table-scroll">
          <table id="{{ t.table_id }}" class="sortable">
            <thead>
              <tr>
                {% for h in t.headers %}
                <th class="{{ h.css_class }}">
                  {% if h.href %}<a href="{{ h.href }}">{{ h.label }}</a>{% else %}{{ h.label }}{% endif %}
                  {% if h.glyph %}<span class="sortind">{{ h.glyph }}</span>{% endif %}
                </th>
                {% endfor %}
              </tr>
            </thead>
            <tbody>
              {% for row in t.rows %}
              <tr>{% for cell in row %}<td>{{ cell }}</td>{% endfor %}</tr>
              {% endfor %}
            </tbody>
          </table>
        </div>
        {% else %}
        <p>No data.</p>
        {% endif %}
      </section>
      {% endfor %}

      {% if charts %}
      <section>
        <h2>Charts</h2>
        {% for c in charts %}
        <div class="chart-wrap">
          <div class="chart-head">
            <div class="chart-title">{{ c.title }}</div>
            <div>
              <button type="button" class="chart-export-btn" data-canvas-id="{{ c.chart_id }}" data-action="png">Download</button>
              {% if c.csv_href %}
              <a class="chart-export-btn" href="{{ c.csv_href }}" download="{{ c.chart_id }}.csv">CSV export</a>
              {% else %}
              <button type="button" class="chart-export-btn" data-canvas-id="{{ c.chart_id }}" data-action="csv">CSV export</button>
              {% endif %}
            </div>
          </div>
          <canvas id="{{ c.chart_id }}"></canvas>
        </div>
        {% endfor %}
      </section>
      <script src="https://cdn.jsdelivr.net/npm/chart.js@4.4.1/dist/chart.umd.min.js"></script>
      <script id="chart-specs" type="application/json">{{ chart_specs | safe }}</script>
      <script>
      (() => {
        const specs = JSON.parse(document.getElementById("chart-specs").textContent);
        Object.entries(specs).forEach(([id, spec]) => {
          const el = document.getElementById(id);
          if (!el || !window.Chart) return;
          const cfg = spec.config;
          cfg.options.plugins = cfg.options.plugins || {};
          cfg.options.plugins.tooltip = {
            callbacks: {
              label: (ctx) => {
                const fmt = (spec.formatted[ctx.datasetIndex] || [])[ctx.dataIndex];
                return `${ctx.dataset.label}: ${fmt !== undefined ? fmt : ctx.formattedValue}`;
              }
            }
          };
          new Chart(el, cfg);
        });

        document.querySelectorAll("button.chart-export-btn").forEach((btn) => {
          btn.addEventListener("click", () => {
            const canvasId = btn.getAttribute("data-canvas-id");
            const a = document.createElement("a");
            if (btn.getAttribute("data-action") === "csv") {
              const blob = new Blob([specs[canvasId].csv], { type: "text/csv;charset=utf-8" });
              a.href = URL.createObjectURL(blob);
              a.download = `${canvasId}.csv`;
            } else {
              const canvas = document.getElementById(canvasId);
              if (!canvas) return;
              a.href = canvas.toDataURL("image/png");
              a.download = `${canvasId}.png`;
            }
            document.body.appendChild(a);
            a.click();
            a.remove();
          });
        });
      })();
      </script>
      {% endif %}
    </main>
  </body>
</html>
""".strip()


def render_html(
    report: Report,
    sort_url: str | None = None,
    csv_url: str | None = None,
) -> str:
    """Render the report page.

    ``sort_url`` and ``csv_url`` are format strings (``{table_id}``,
    ``{column}``, ``{chart_id}``) used by the web app to make headers and
    CSV buttons server backed. Without them the page is fully static.
    """
    template = Template(_HTML_TEMPLATE, autoescape=True)
    tables = [_table_view(table, sort_url) for table in report.tables]
    charts = [
        {
            "chart_id": chart.chart_id,
            "title": chart.title,
            "csv_href": csv_url.format(chart_id=chart.chart_id) if csv_url else "",
        }
        for chart in report.charts
    ]
    specs = {}
    for chart in report.charts:
        spec = chart_config(chart)
        spec["csv"] = export_csv(chart)
        specs[chart.chart_id] = spec
    return template.render(
        report=report,
        tables=tables,
        charts=charts,
        chart_specs=_script_safe_json(specs),
    )


def _table_view(table: ReportTable, sort_url: str | None) -> dict:
    headers = []
    for idx, label in enumerate(table.header):
        css_class, glyph = header_indicator(table, idx)
        sortable = idx not in table.unsortable_columns
        if not sortable:
            css_class = "sorttable_nosort"
        headers.append(
            {
                "label": label,
                "css_class": css_class,
                "glyph": glyph,
                "href": sort_url.format(table_id=table.table_id, column=idx) if sort_url and sortable and table.rows else "",
            }
        )
    return {
        "table_id": table.table_id,
        "title": table.title,
        "headers": headers,
        "rows": table.rows,
    }


def _script_safe_json(payload: dict) -> str:
    return json.dumps(payload).replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")
