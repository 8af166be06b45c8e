from collections import defaultdict
from typing import Iterable

from .model import Ambiguous, CorpusFile, EntityName, Missing, Resolution, Unique

CorpusIndex = dict[str, list[CorpusFile]]


def build_corpus_index(files: Iterable[CorpusFile]) -> CorpusIndex:
    """Basename -> files with that basename, in corpus iteration order."""
    index: CorpusIndex = defaultdict(list)
    for f in files:
        index[f.basename].append(f)
    return dict(index)


def resolve(
    name: EntityName, index: CorpusIndex, already_linked: set[str] | frozenset[str] = frozenset()
) -> Resolution | None:
    """
    Classify a page name against the corpus.

    Returns None when the name is ambiguous but one of its candidates is
    already linked, i.e. there is nothing to do for it.
    """
    matches = index.get(name, [])
    if not matches:
        return Missing(name)
    if len(matches) == 1:
        return Unique(name, matches[0])
    if any(m.path in already_linked for m in matches):
        return None
    return Ambiguous(name, tuple(matches))
