"""Handle numbers and rare words with placeholder terminals.

Words that are numbers, and words that occur less than ``mincount`` times in
the training data, are replaced by the placeholders ``_num_`` and ``_rare_``
so that the grammar has terminal rules for them. The flow is as follows:

- Grammar extraction:

  #. countwords (word frequencies of the treebank)
  #. replaceraretreewords (adjust trees)
  #. [ read off grammar ]

- During parsing:

  #. replaceexceptionalwords (only give known words and placeholders to parser)
  #. [ parse ]
  #. reinsertexceptionalwords (restore original words in parse trees)
"""
import re
from collections import Counter
from .tree import Tree

NUM = '_num_'
RARE = '_rare_'
# integers and decimal numbers such as 12, +3, 3.14, 12., .5; not a bare '.'
# The whole word must match: words containing digits, such as B52 or 3D,
# are treated as ordinary words.
NUMBERRE = re.compile(r'^\+?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)$')


def isnumber(word):
	"""Test whether word should be replaced by the number placeholder.

	>>> [isnumber(a) for a in ('1984', '3.14', '.5', '.', 'B52')]
	[True, True, True, False, False]"""
	return NUMBERRE.match(word) is not None


def countwords(trees):
	"""Count the frequencies of the words in a sequence of trees."""
	return Counter(word for tree in trees for word in tree.leaves())


def replaceword(word, lexicon, mincount):
	"""Return placeholder for word if it is a number or rare, else word."""
	if isnumber(word):
		return NUM
	elif lexicon.get(word, 0) < mincount:
		return RARE
	return word


def replaceraretreewords(tree, lexicon, mincount):
	"""Replace numbers and rare words in the leaves of a training tree.

	Modifies tree in-place.

	>>> tree = Tree('(S (NP Fido) (VP (V ate) (NP 3)))')
	>>> print(replaceraretreewords(tree, Counter(ate=2, Fido=1), 2))
	(S (NP _rare_) (VP (V ate) (NP _num_)))"""
	for node in tree.subtrees():
		for n, child in enumerate(node):
			if not isinstance(child, Tree):
				node[n] = replaceword(child, lexicon, mincount)
	return tree


def replaceexceptionalwords(sent, lexicon, mincount):
	"""Replace numbers and rare words in a sentence to be parsed.

	:param sent: a sequence of words.
	:param lexicon: a mapping of words to their frequencies; words not in
		the mapping have frequency 0.
	:returns: a new list of words.

	>>> replaceexceptionalwords(['the', 'dog', 'ate', '12', 'bones'],
	...		Counter(the=3, dog=1, ate=1, bones=1), 1)
	['the', 'dog', 'ate', '_num_', 'bones']"""
	return [replaceword(word, lexicon, mincount) for word in sent]


def reinsertexceptionalwords(tree, sent):
	"""Restore the original words for placeholders in the leaves of a tree.

	The n-th leaf of the tree corresponds to the n-th word of ``sent``, the
	sentence before replacing exceptional words. Modifies tree in-place.

	>>> tree = Tree('(S (NP _rare_) (VP (V ate) (NP _num_)))')
	>>> print(reinsertexceptionalwords(tree, ['Fido', 'ate', '3']))
	(S (NP Fido) (VP (V ate) (NP 3)))"""
	positions = tree.treepositions('leaves')
	if len(positions) != len(sent):
		raise ValueError('tree has %d leaves, sentence has %d words' % (
				len(positions), len(sent)))
	for pos, word in zip(positions, sent):
		if tree[pos] in (RARE, NUM):
			tree[pos] = word
	return tree


__all__ = ['NUM', 'RARE', 'NUMBERRE', 'isnumber', 'countwords',
		'replaceword', 'replaceraretreewords', 'replaceexceptionalwords',
		'reinsertexceptionalwords']
