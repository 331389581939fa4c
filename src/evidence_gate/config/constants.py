"""Fixed constants: user-facing wording, word lists, and markers."""

from __future__ import annotations

# User-facing wording. Callers must not override these.
NOT_FOUND_FALLBACK = "I could not find information about this in the available documents."
VERIFICATION_FAILED_MESSAGE = "Verification could not be completed."
NOT_FOUND_NOTE = "Not found in the available documents: {claim}"

# Inline markers added by the response assembler
HEDGE_MARKER = "(likely)"
CAVEAT_MARKER = "(partially supported)"
UNVERIFIED_MARKER = "(unverified)"

STOPWORDS = frozenset(
    {
        "a", "about", "above", "after", "again", "all", "also", "am", "an", "and",
        "any", "are", "as", "at", "be", "because", "been", "before", "being",
        "below", "between", "both", "but", "by", "can", "could", "did", "do",
        "does", "doing", "down", "during", "each", "few", "for", "from",
        "further", "had", "has", "have", "having", "he", "her", "here", "hers",
        "him", "his", "how", "i", "if", "in", "into", "is", "it", "its",
        "itself", "just", "may", "me", "might", "more", "most", "must", "my",
        "of", "off", "on", "once", "only", "or", "other", "our", "ours", "out",
        "over", "own", "same", "she", "should", "so", "some", "such", "than",
        "that", "the", "their", "theirs", "them", "then", "there", "these",
        "they", "this", "those", "through", "to", "too", "under", "until", "up",
        "very", "was", "we", "were", "what", "when", "where", "which", "while",
        "who", "whom", "why", "will", "with", "would", "you", "your", "yours",
    }
)

# Words that flip the polarity of a statement. Excluded from content tokens.
NEGATION_CUES = frozenset(
    {
        "not", "no", "never", "none", "nobody", "nothing", "neither", "nor",
        "cannot", "without", "against", "infeasible", "unfeasible",
        "oppose", "opposes", "opposed", "opposing", "opposition",
        "reject", "rejects", "rejected", "rejecting", "rejection",
        "disagree", "disagrees", "disagreed", "objects", "objected",
        "unsupported", "unable",
    }
)

# Leading discourse markers stripped from claim spans
DISCOURSE_MARKERS = (
    "additionally",
    "also",
    "as a result",
    "consequently",
    "conversely",
    "finally",
    "for example",
    "for instance",
    "furthermore",
    "however",
    "importantly",
    "in addition",
    "in contrast",
    "in particular",
    "in summary",
    "meanwhile",
    "moreover",
    "notably",
    "overall",
    "similarly",
    "specifically",
    "therefore",
    "thus",
    "to summarize",
    "to sum up",
    "in conclusion",
    "based on the documents",
    "based on the available documents",
    "according to the documents",
)

# Sentences that are rhetorical or structural rather than factual
RHETORICAL_PREFIXES = (
    "here is",
    "here are",
    "here's",
    "below is",
    "below are",
    "the following",
    "let me",
    "i hope",
    "i can",
    "i will",
    "i'll",
    "feel free",
    "please let me know",
    "let me know",
    "hope this helps",
    "if you",
    "would you like",
)

# Conjunctions trimmed when a neighbouring claim is removed
DANGLING_CONJUNCTIONS = (
    "and",
    "but",
    "or",
    "while",
    "whereas",
    "although",
    "though",
)

ABBREVIATIONS = frozenset(
    {"e.g.", "i.e.", "etc.", "vs.", "cf.", "al.", "fig.", "no.", "approx.", "dr.", "mr.", "ms."}
)
