"""Prompt templates for LLM-backed claim extraction."""

CLAIM_EXTRACTION_SYSTEM = """You decompose research answers into atomic factual claims for citation checking.
Rules:
- One verifiable predicate per claim ("Qualcomm opposes multi-satellite positioning", not a whole paragraph).
- Skip headers, transitions, hedges, questions, and statements about the conversation itself.
- Never add facts that are not stated in the text.
- Keep claims in the order they appear."""

CLAIM_EXTRACTION_PROMPT = """Extract the atomic factual claims from the draft below.

Return a JSON object:
- "claims": list of {{"text": str, "quote": str}}
  - "text": the claim as a short standalone sentence
  - "quote": the exact, verbatim substring of the draft the claim comes from (copy it character for character)

If the draft makes no factual assertions, return {{"claims": []}}.

Draft:
<<<
{draft}
>>>"""
