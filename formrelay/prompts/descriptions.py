from langchain_core.prompts import PromptTemplate

WRAPPER_STYLE = "font-family:system-ui,Segoe UI,Roboto,Arial,sans-serif;font-size:14px;line-height:1.5;color:#0B1220"

COMMERCIAL_DESCRIPTION = """<div style="{style}">
  <h2 style="margin:0 0 6px 0;font-size:18px">New commercial contact</h2>
  <ul style="padding-left:18px;margin:0 0 12px">
    <li><b>Requester:</b> {name}</li>
    <li><b>Company:</b> {company}</li>
    <li><b>E-mail:</b> {email}</li>
    <li><b>Phone:</b> {phone}</li>
    <li><b>Company size:</b> {company_size}</li>
    <li><b>Interest(s):</b> {interests}</li>
    <li><b>Origin:</b> {origin}</li>
    <li><b>Channel:</b> {channel}</li>
    <li><b>Data processing consent:</b> {consent}</li>
  </ul>
  {notes}
</div>"""

INCIDENT_DESCRIPTION = """<div style="{style}">
  <h2 style="margin:0 0 6px 0;font-size:18px">Incident reported</h2>
  <p style="margin:0 0 12px;color:#4B5563">Created automatically by the incident form.</p>
  <ul style="padding-left:18px;margin:0 0 12px">
    <li><b>Requester:</b> {name}</li>
    <li><b>Company:</b> {company}</li>
    <li><b>E-mail:</b> {email}</li>
    <li><b>Phone:</b> {phone}</li>
    <li><b>Affected service:</b> {service}</li>
    <li><b>Severity:</b> {severity}</li>
    <li><b>Impact:</b> {impact}</li>
    <li><b>Started at:</b> {start_time}</li>
    <li><b>Environment:</b> {environment}</li>
    <li><b>Summary:</b> {summary}</li>
    <li><b>Origin:</b> {origin}</li>
    <li><b>Channel:</b> {channel}</li>
    <li><b>Data processing consent:</b> {consent}</li>
  </ul>
  {details}
  {evidence}
</div>"""

# Free-text block; pre-line keeps the submitter's line breaks.
TEXT_BLOCK = """<div style="margin-top:8px"><b>{label}:</b><br><div style="white-space:pre-line">{text}</div></div>"""

commercial_description = PromptTemplate.from_template(COMMERCIAL_DESCRIPTION)

incident_description = PromptTemplate.from_template(INCIDENT_DESCRIPTION)

text_block = PromptTemplate.from_template(TEXT_BLOCK)
