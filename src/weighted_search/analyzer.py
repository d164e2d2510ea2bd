"""
Keyword Analyzer

Normalizes text for the keyword search index. The same normalization is
applied to stored keywords and to incoming needles, so substring matching
in the index is case- and diacritic-insensitive.
"""

import html
import re
import unicodedata


class KeywordAnalyzer:
    _whitespace = re.compile(r"\s+")

    def normalize(self, text: str) -> str:
        """
        Normalize text into index keywords.

        Decodes entities, folds case, drops combining marks
        (é -> e) and collapses whitespace. Punctuation is kept so that
        needles such as "%" or "c++" still match.
        """
        if not text or not text.strip():
            return ""

        text = html.unescape(text).replace("\xa0", " ")
        decomposed = unicodedata.normalize("NFKD", text)
        stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
        folded = unicodedata.normalize("NFC", stripped).casefold()
        return self._whitespace.sub(" ", folded).strip()


# Global instance
analyzer = KeywordAnalyzer()
