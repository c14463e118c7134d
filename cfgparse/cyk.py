"""CYK chart parsing with a grammar in Chomsky Normal Form.

The chart is filled bottom-up: cells for single words are seeded from the
terminal rules of the grammar, and the cell for each longer span combines
the candidates of every pair of adjacent smaller spans with the binary rules
of the grammar. Rules of other types are ignored, so the grammar should be
converted with ``Grammar.tocnf()`` first.

>>> from cfgparse.grammar import Grammar
>>> from cfgparse.rule import Rule
>>> grammar = Grammar([Rule.parse(a) for a in ('S -> NP VP', 'NP -> Det N',
...		'NP -> dog', 'VP -> barks', 'Det -> the', 'N -> dog')])
>>> for tree in parse('the dog barks'.split(), grammar):
...		print(tree)
(S (NP (Det the) (N dog)) (VP barks))
"""
import logging
from .containers import ParseNode, ProbabilisticParseNode, newchart
from .grammar import logprob
from .treetransforms import correctparents, removehelpernodes


def fillchart(sent, grammar, prob=False):
	"""Fill a chart for a sentence.

	:param sent: a sequence of words, after replacing rare words and
		numbers; see ``Grammar.replaceexceptionalwords()``.
	:param grammar: a grammar in Chomsky Normal Form.
	:param prob: if True, candidates carry log probabilities and each cell
		keeps only the best candidate for each label; otherwise all
		candidates are kept.
	:returns: the chart; see ``containers.newchart()``."""
	n = len(sent)
	chart = newchart(n)
	for i, word in enumerate(sent):
		cell = chart[i][i]
		for rule in grammar.terminalruleswithrightside(word):
			if prob:
				cell.update(ProbabilisticParseNode(
						rule.lhs, logprob(rule.prob), word))
			else:
				cell.add(ParseNode(rule.lhs, word))
	binary = {}  # (label1, label2) => rules
	lookup = grammar.ruleswithtwononterminalsonrightside
	for span in range(2, n + 1):
		for i in range(n - span + 1):
			j = i + span - 1
			cell = chart[i][j]
			for k in range(i, j):
				for left in chart[i][k]:
					for right in chart[k + 1][j]:
						pair = left.label, right.label
						if pair not in binary:
							binary[pair] = lookup(*pair)
						for rule in binary[pair]:
							if prob:
								cell.update(ProbabilisticParseNode(rule.lhs,
										logprob(rule.prob) + left.logprob
										+ right.logprob, left, right))
							else:
								cell.add(ParseNode(rule.lhs, left, right))
	if n:
		logging.debug('%d candidates in top cell; %d in chart',
				len(chart[0][-1]), sum(len(cell) for row in chart
					for cell in row if cell is not None))
	return chart


def parse(sent, grammar, start='S'):
	"""Return all parse trees for a sentence.

	:param sent: a sequence of words, after replacing rare words and
		numbers.
	:param start: the label of the root node of complete parses.
	:returns: a list of trees, empty if the sentence has no parse; nodes
		introduced by binarization are removed."""
	if not sent:
		return []
	chart = fillchart(sent, grammar)
	return [postprocess(node.totree(), grammar.helpers)
			for node in chart[0][-1].withlabel(start)]


def viterbiparse(sent, grammar, start='S'):
	"""Return the most probable parse trees for a sentence.

	:param grammar: a ProbabilisticGrammar in Chomsky Normal Form.
	:returns: a list with the tree(s) with the highest probability, empty if
		the sentence has no parse or only parses with probability zero. The
		``prob`` attribute of each node is the log probability of its
		subtree.

	>>> from cfgparse.grammar import ProbabilisticGrammar
	>>> from cfgparse.rule import ProbabilisticRule
	>>> grammar = ProbabilisticGrammar([ProbabilisticRule.parse(a) for a in (
	...		'S -> NP VP [1]', 'NP -> Mary [1]', 'VP -> walks [0.5]',
	...		'VP -> talks [0.5]')])
	>>> tree, = viterbiparse('Mary walks'.split(), grammar)
	>>> print(tree)
	(S (NP Mary) (VP walks))
	>>> round(tree.prob, 4)
	-0.6931"""
	if not sent:
		return []
	chart = fillchart(sent, grammar, prob=True)
	candidates = chart[0][-1].withlabel(start)
	if not candidates:
		return []
	best = max(node.logprob for node in candidates)
	if best == float('-inf'):
		return []
	return [postprocess(node.totree(), grammar.helpers)
			for node in candidates if node.logprob == best]


def postprocess(tree, helpers):
	"""Set parent references and remove the nodes with a label in helpers."""
	return removehelpernodes(correctparents(tree), helpers)


__all__ = ['fillchart', 'parse', 'viterbiparse', 'postprocess']
