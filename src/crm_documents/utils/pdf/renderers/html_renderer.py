"""
HTML rendition of a document payload, for headless-browser PDF services.
Shares the payload and totals with the PDF renderer, only the markup differs.
"""

from __future__ import annotations

from typing import Mapping

from jinja2 import Environment, select_autoescape

from crm_documents.utils.currency import format_currency, format_qty
from crm_documents.utils.pdf.core.layout_common import COLORS
from crm_documents.utils.pdf.sections.items_table import describe
from crm_documents.utils.pdf.sections.parties import build_recipient_lines, build_sender_lines

DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html lang="da">
<head>
<meta charset="utf-8">
<title>{{ doc.title }} {{ doc.number }}</title>
<style>
  * { margin: 0; padding: 0; box-sizing: border-box; }
  body { font-family: 'Inter', -apple-system, 'Segoe UI', sans-serif; font-size: 10pt; color: {{ colors.dark }}; line-height: 1.4; }
  .page { width: 210mm; min-height: 297mm; padding: 15mm; }
  .header { display: flex; justify-content: space-between; align-items: flex-start; padding-bottom: 15px; margin-bottom: 20px; border-bottom: 2px solid {{ colors.tan }}; }
  .logo { max-height: 50px; max-width: 180px; }
  .company-name { font-size: 20pt; font-weight: 700; color: {{ colors.primary }}; }
  .doc-title { font-size: 24pt; font-weight: 700; color: {{ colors.primary }}; text-align: right; }
  .meta { background: {{ colors.cream }}; border: 1px solid {{ colors.tan }}; padding: 8px 10px; margin-top: 6px; }
  .parties { display: flex; gap: 40px; margin-bottom: 24px; }
  .parties > div { flex: 1; }
  .parties h3 { font-size: 12pt; margin-bottom: 6px; }
  table { width: 100%; border-collapse: collapse; margin-bottom: 20px; }
  th { background: {{ colors.light_green }}; text-align: left; padding: 6px 10px; }
  td { padding: 6px 10px; vertical-align: top; }
  tr.odd td { background: {{ colors.cream }}; }
  .num { text-align: right; white-space: nowrap; }
  .totals { margin-left: auto; width: 320px; background: {{ colors.light_gray }}; border: 1px solid {{ colors.green }}; padding: 10px; }
  .totals .row { display: flex; justify-content: space-between; padding: 4px 0; }
  .totals .grand { border-top: 1px solid {{ colors.green }}; margin-top: 6px; padding-top: 8px; font-weight: 700; font-size: 12pt; }
  .terms { margin-top: 24px; }
  .footer { margin-top: 40px; text-align: right; font-size: 8pt; }
</style>
</head>
<body>
<div class="page">
  <div class="header">
    <div>
      {% if doc.logo_url %}<img class="logo" src="{{ doc.logo_url }}" alt="{{ doc.company.name }}">
      {% else %}<div class="company-name">{{ doc.company.name }}</div>{% endif %}
    </div>
    <div>
      <div class="doc-title">{{ doc.title }}</div>
      <div class="meta">
        <div>{{ labels.number_label }} {{ doc.number }}</div>
        <div>{{ labels.date_label }} {{ doc.issue_date }}</div>
        <div>{{ labels.extra_label }} {{ doc.extra_value }}</div>
      </div>
    </div>
  </div>
  <div class="parties">
    <div>
      <h3>{{ labels["from"] }}</h3>
      <strong>{{ doc.company.name }}</strong>
      {% for line in sender_lines %}<div>{{ line }}</div>{% endfor %}
    </div>
    <div>
      <h3>{{ labels.to }}</h3>
      <strong>{{ doc.contact.name }}</strong>
      {% for line in recipient_lines %}<div>{{ line }}</div>{% endfor %}
    </div>
  </div>
  <table>
    <thead>
      <tr>
        <th>{{ labels.col_description }}</th>
        <th class="num">{{ labels.col_qty }}</th>
        <th class="num">{{ labels.col_unit }}</th>
        <th class="num">{{ labels.col_total }}</th>
      </tr>
    </thead>
    <tbody>
      {% for row in rows %}
      <tr class="{{ loop.cycle('even', 'odd') }}">
        <td>{{ row.description }}</td>
        <td class="num">{{ row.qty }}</td>
        <td class="num">{{ row.unit }}</td>
        <td class="num">{{ row.total }}</td>
      </tr>
      {% else %}
      <tr class="odd"><td colspan="4">{{ labels.no_items }}</td></tr>
      {% endfor %}
    </tbody>
  </table>
  <div class="totals">
    <div class="row"><span>{{ labels.subtotal }}</span><span>{{ doc.totals.subtotal_minor | money(doc.currency) }}</span></div>
    <div class="row"><span>{{ labels.tax }}</span><span>{{ doc.totals.tax_minor | money(doc.currency) }}</span></div>
    <div class="row grand"><span>{{ labels.total }}</span><span>{{ doc.totals.total_minor | money(doc.currency) }}</span></div>
  </div>
  <div class="terms">
    <p>{{ labels.terms }}: {{ doc.payment_terms }}</p>
    <p>{{ labels.notes }}: {{ doc.notes }}</p>
  </div>
  <div class="footer">{{ labels.footer }}</div>
</div>
</body>
</html>
"""

_env = Environment(autoescape=select_autoescape(default_for_string=True, default=True))
_env.filters["money"] = format_currency
_template = _env.from_string(DOCUMENT_TEMPLATE)


def build_rows(payload: Mapping) -> list[dict]:
    suffix = payload["labels"].get("discount_suffix", "rabat")
    currency = payload["currency"]
    return [
        {
            "description": describe(item, suffix),
            "qty": format_qty(item.qty),
            "unit": format_currency(item.unit_minor, currency),
            "total": format_currency(totals.after_discount_minor, currency),
        }
        for item, totals in zip(payload["items"], payload["line_totals"])
    ]


def render_html(payload: Mapping) -> str:
    labels = payload["labels"]
    return _template.render(
        doc=payload,
        labels=labels,
        colors=COLORS,
        rows=build_rows(payload),
        sender_lines=build_sender_lines(payload["company"], labels.get("address_fallback", "")),
        recipient_lines=build_recipient_lines(payload["contact"]),
    )
