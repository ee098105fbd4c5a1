"""
prompts for condition report extraction.

uses ChatPromptTemplate for consistent message handling. literal json
braces are doubled so they are not read as template variables.
"""

from langchain_core.prompts import ChatPromptTemplate


INTEL_EXTRACTION_SYSTEM_PROMPT = """You are an analyst of ski touring conditions in the Polish mountains (Tatry, Beskidy).
You read short web search snippets, often written in Polish, and extract condition facts from them.

Rules:
- use only what the text says, never invent conditions, places or dates
- write the summary in English, ONE short sentence (max 20 words)
- start the summary directly with the conditions, no introduction such as "Here is" or "Summary:"
- answer with valid JSON only, no explanations and no markdown"""


INTEL_EXTRACTION_USER_PROMPT = """Extract ski touring conditions from this text.

TEXT:
\"\"\"
{title}
{snippet}
\"\"\"

Return JSON with exactly these fields:
{{
  "summary": "one sentence with the conditions, e.g. Fresh powder above 1200m, icy trails below.",
  "location": "mountain or trail name, or null if unknown",
  "snow_type": "one of: puch, firn, szren, beton, cukier, kamienie, mokry, or null if unknown",
  "hazards": ["hazards mentioned: avalanche, ice, fog, wind, rocks, ..."],
  "report_date": "ISO date if the text gives one, or null",
  "conditions_rating": "good, moderate, poor or unknown",
  "observations": ["2-3 key observations from the text"]
}}"""


def get_intel_extraction_prompt() -> ChatPromptTemplate:
    """
    returns the ChatPromptTemplate for condition report extraction.

    expected input variables:
    - title: search hit title
    - snippet: search hit snippet
    """
    return ChatPromptTemplate.from_messages([
        ("system", INTEL_EXTRACTION_SYSTEM_PROMPT),
        ("user", INTEL_EXTRACTION_USER_PROMPT),
    ])
