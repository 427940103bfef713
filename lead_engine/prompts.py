"""Instruction templates sent to the grounded search model."""
from __future__ import annotations

from typing import List

PRIMARY_TARGET_AREAS = (
    "Fleet Management / Fleet Vehicles",
    "Procurement / Purchasing (especially for cleaning supplies, detergents, industrial equipment, pressure washers)",
    "Maintenance Management / Facilities Management",
    "Logistics / Supply Chain Management",
    "Operations Management (related to heavy equipment)",
    "EHS (Environmental, Health, and Safety) managers who might handle industrial cleaning.",
)

_RESEARCH_TEMPLATE = """
You are a highly advanced corporate research AI specializing in lead generation.
Your task is to conduct deep research on the company provided, using your grounded search capabilities to find publicly available information.

Company: "{company}"
{location_line}

Your goal is to provide a comprehensive research document in a structured JSON format. The JSON object must have two top-level keys: "overview" and "contacts".

1.  **overview**: A concise but insightful summary (2-3 paragraphs) about the company. Include any recent news, potential talking points for a sales call, or reasons for congratulations (e.g., recent funding, new product launch, awards). This should provide actionable intelligence.

2.  **contacts**: A JSON array of all publicly identifiable employees. For each employee, find:
    - Full Name
    - Job Title/Role
    - Business Email Address
    - Business Phone Number
    - A boolean flag "isPrimaryTarget"

The "isPrimaryTarget" flag must be set to `true` if the employee's role is related to any of the following areas, otherwise set it to `false`:
{target_areas}

**CRITICAL RULES FOR CONTACTS:**
- Each contact object in the array MUST have the keys: "name", "role", "email", "phone", and "isPrimaryTarget".
- If a specific piece of information (like a phone or email) cannot be found, use the string value "Not Found".
- Only include a contact if you can find their name AND at least one of the following: their role, email, or phone number. Do not include contacts where you only have a name.

**OUTPUT FORMAT:**
Your entire response must be ONLY the raw JSON data. Do not include any text, explanation, or markdown formatting (like ```json) before or after the JSON.

Example output format:
{{
  "overview": "ExampleCorp is a leading provider of logistics solutions, recently recognized for its innovative supply chain optimization software. They just announced a new partnership with Global Shipping Inc. to expand their international reach, a great point of congratulations.",
  "contacts": [
    {{
      "name": "John Doe",
      "role": "Fleet Manager",
      "email": "john.doe@examplecorp.com",
      "phone": "+1-555-123-4567",
      "isPrimaryTarget": true
    }},
    {{
      "name": "Peter Jones",
      "role": "Marketing Coordinator",
      "email": "peter.jones@examplecorp.com",
      "phone": "Not Found",
      "isPrimaryTarget": false
    }}
  ]
}}
"""

_ENRICHMENT_TEMPLATE = """
You are an expert contact researcher. Use your grounded search capabilities to build a verified contact profile for one person.

Person: "{name}"
Role: "{role}"
Company: "{company}"

Run each of these searches and read the result snippets and titles, not just the links. Contact details frequently appear in the snippet text itself:
{queries}

**RECONCILIATION RULES:**
- Directory sites often show partially masked values (for example "j***@acme.com" or "(555) ***-4567"). When several sources show different parts of the same value, combine them into one complete value only if the combination is unambiguous.
- Never return a value that still contains masking characters.
- Confidence must be "high" only for a value seen complete and unmasked in a single source.
- Use "medium" for a value inferred from a pattern rather than observed (for example the company's first.last@domain email format).
- Use "low" for any value you produced by combining masked fragments.

**OUTPUT FORMAT:**
Your entire response must be ONLY a raw JSON object with these keys:
{{
  "summary": "Two or three sentences on the person's professional background and current responsibilities.",
  "linkedinUrl": "https://www.linkedin.com/in/... or \\"Not Found\\"",
  "emails": [{{"value": "jane.doe@acme.com", "confidence": "high"}}],
  "phones": [{{"value": "+1-555-123-4567", "confidence": "medium"}}]
}}
Use empty arrays when no emails or phones are found.
"""


def research_prompt(company: str, location: str = "") -> str:
    """Build the company research instruction."""

    location = (location or "").strip()
    location_line = f'Location Focus: "{location}"' if location else ""
    target_areas = "\n".join(f"- {area}" for area in PRIMARY_TARGET_AREAS)
    return _RESEARCH_TEMPLATE.format(
        company=company.strip(),
        location_line=location_line,
        target_areas=target_areas,
    )


def enrichment_queries(name: str, role: str, company: str) -> List[str]:
    queries = [f'"{name}" "{company}" email']
    if role:
        queries.append(f'"{name}" "{role}" "{company}" contact')
    queries.append(f'"{name}" {company} phone')
    queries.append(f'site:linkedin.com/in "{name}" "{company}"')
    return queries


def enrichment_prompt(name: str, role: str, company: str) -> str:
    """Build the per-contact enrichment instruction."""

    role = role or ""
    queries = "\n".join(f"- {query}" for query in enrichment_queries(name, role, company))
    return _ENRICHMENT_TEMPLATE.format(
        name=name,
        role=role or "Unknown",
        company=company,
        queries=queries,
    )


__all__ = ["PRIMARY_TARGET_AREAS", "enrichment_prompt", "enrichment_queries", "research_prompt"]
