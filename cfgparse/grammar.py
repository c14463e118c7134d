"""Context-free grammars with sorted rule indices; conversion to CNF.

A grammar keeps all of its rules in two lists: ``rules``, sorted by left-hand
side and then right-hand side, and ``rulesrightsorted``, sorted by right-hand
side and then left-hand side. Lookups locate the range of matching rules with
a binary search on the appropriate index, which is why every mutation keeps
both lists sorted. The only exception is the bulk rewriting in ``tocnf()``,
which sorts both indices once at the end.

>>> grammar = Grammar([Rule.parse(a) for a in (
...		'S -> NP VP', 'NP -> Det N', 'NP -> dog', 'VP -> barks',
...		'Det -> the', 'N -> dog')])
>>> [str(a) for a in grammar.ruleswithleftside('NP')]
['NP -> Det N', 'NP -> dog']
>>> [str(a) for a in grammar.terminalruleswithrightside('dog')]
['N -> dog', 'NP -> dog']
"""
import logging
from math import log
from bisect import bisect_left, bisect_right, insort
from collections import Counter
import numpy as np
from .tree import Tree
from .rule import (Rule, ProbabilisticRule, TERMINAL, SINGLE_NON_TERMINAL,
		TWO_NON_TERMINAL, MULTIPLE_NON_TERMINAL, leftsidekey, rightsidekey,
		rulekey, rightrulekey, classify, trimsymbol)
from .lexicon import (countwords, replaceraretreewords,
		replaceexceptionalwords, reinsertexceptionalwords)
from .util import openread


class UniqueIDs(object):
	"""Produce fresh symbols with numeric IDs; IDs are never re-used.

	:param prefix: a string prepended to each ID.
	:param exclude: a container with symbols that should be skipped.

	>>> ids = UniqueIDs('X', exclude={'X1'})
	>>> next(ids), next(ids)
	('X0', 'X2')"""

	def __init__(self, prefix='', exclude=()):
		self.cnt = 0  # next available ID
		self.prefix = prefix
		self.exclude = exclude

	def __next__(self):
		result = '%s%d' % (self.prefix, self.cnt)
		self.cnt += 1
		while result in self.exclude:
			result = '%s%d' % (self.prefix, self.cnt)
			self.cnt += 1
		return result

	def __iter__(self):
		return self


class Grammar(object):
	"""A context-free grammar with a lexicon of word frequencies.

	:param rules: an iterable of Rule objects; duplicate rules (same left and
		right-hand side) are only stored once.
	:param lexicon: a mapping of words to frequencies, used to decide which
		words are rare.
	:param mincount: words with a frequency lower than this are rare.

	After bulk loading, rule types are assigned by ``updatetypes()``."""
	ruleclass = Rule

	def __init__(self, rules=(), lexicon=None, mincount=1):
		rules = sorted(rules, key=rulekey)
		self.rules = [rule for n, rule in enumerate(rules)
				if n == 0 or rulekey(rule) != rulekey(rules[n - 1])]
		self.rulesrightsorted = sorted(self.rules, key=rightrulekey)
		self.lexicon = Counter() if lexicon is None else Counter(lexicon)
		self.mincount = mincount
		# fresh non-terminals for binarization; shared by all conversions
		# of this grammar so that symbols are never re-used.
		self.newsymbols = UniqueIDs('X')
		# the symbols introduced by binarization, removed from parse trees
		self.helpers = set()
		self.updatetypes()

	@classmethod
	def fromfiles(cls, rulefile, lexiconfile, mincount=1, encoding='utf8'):
		"""Read a grammar from a rule file and a lexicon file.

		:param rulefile: one rule per line, e.g., ``NP -> DT NN``; for a
			probabilistic grammar followed by a probability: ``[0.25]``.
		:param lexiconfile: one word and its frequency per line."""
		with openread(rulefile, encoding=encoding) as inp:
			rules = readrules(inp, cls.ruleclass)
		with openread(lexiconfile, encoding=encoding) as inp:
			lexicon = readlexicon(inp)
		grammar = cls(rules, lexicon, mincount)
		logging.info('read %d rules from %s; %d word types from %s',
				len(grammar), rulefile, len(lexicon), lexiconfile)
		return grammar

	@classmethod
	def fromtreebank(cls, trees, mincount=1):
		"""Read off a grammar from a sequence of trees.

		Numbers and words with a frequency lower than ``mincount`` are
		replaced by placeholders before reading off rules; the original
		trees are not modified. Labels are trimmed of function tags.

		>>> grammar = Grammar.fromtreebank([Tree(
		...		'(S (NP-SBJ (NNP Mary)) (VP (VBZ walks)))')])
		>>> print(grammar)
		NNP -> Mary
		NP -> NNP
		S -> NP VP
		VBZ -> walks
		VP -> VBZ"""
		trees = [tree.copy(deep=True) for tree in trees]
		grammar = cls(lexicon=countwords(trees), mincount=mincount)
		for tree in trees:
			replaceraretreewords(tree, grammar.lexicon, mincount)
			grammar.addrules(tree)
		grammar.estimate()
		grammar.updatetypes()
		logging.info('read off %d rules from %d trees; %d word types',
				len(grammar), len(trees), len(grammar.lexicon))
		return grammar

	def addrules(self, tree):
		"""Add the rules for all nodes of a tree, in pre-order."""
		for node in tree.subtrees():
			rule = torule(node, self.ruleclass)
			if rule is not None:
				self.countrule(rule)

	def countrule(self, rule):
		"""Add rule unless it is already present.

		:returns: the stored rule."""
		stored = self.searchrule(rule)
		if stored is None:
			self.addrule(rule)
			return rule
		return stored

	def estimate(self):
		"""Estimate rule weights from counts; plain grammars have none."""

	def updatetypes(self):
		"""Classify all rules given the current set of non-terminals.

		A symbol is a non-terminal if it occurs as the left-hand side of some
		rule; since this is a property of the whole rule set, this should be
		called whenever that set changes by other means than ``addrule()``
		and ``removerule()``."""
		nonterminals = {rule.lhs for rule in self.rules}
		for rule in self.rules:
			rule.type = classify(rule, nonterminals)

	# === Indices ===============================================
	def addrule(self, rule):
		"""Insert rule in both indices, unless an equal rule is present.

		:returns: True if the rule was added."""
		key = rulekey(rule)
		pos = bisect_left(self.rules, key, key=rulekey)
		if pos < len(self.rules) and rulekey(self.rules[pos]) == key:
			return False
		self.rules.insert(pos, rule)
		insort(self.rulesrightsorted, rule, key=rightrulekey)
		return True

	def removerule(self, rule):
		"""Remove the rule equal to ``rule`` from both indices.

		:returns: True if the rule was found and removed."""
		key = rulekey(rule)
		pos = bisect_left(self.rules, key, key=rulekey)
		if pos == len(self.rules) or rulekey(self.rules[pos]) != key:
			return False
		del self.rules[pos]
		# rules with the same right-hand side are contiguous; look among
		# them for the one with the right left-hand side.
		rhs = rightsidekey(rule)
		pos = bisect_left(self.rulesrightsorted, rhs, key=rightsidekey)
		while (pos < len(self.rulesrightsorted)
				and rightsidekey(self.rulesrightsorted[pos]) == rhs):
			if self.rulesrightsorted[pos].lhs == rule.lhs:
				del self.rulesrightsorted[pos]
				return True
			pos += 1
		raise AssertionError('rule %s missing from right-hand side index'
				% rule)

	def searchrule(self, rule):
		""":returns: the stored rule with the same left and right-hand side
		as ``rule``, or None."""
		key = rulekey(rule)
		pos = bisect_left(self.rules, key, key=rulekey)
		if pos < len(self.rules) and rulekey(self.rules[pos]) == key:
			return self.rules[pos]
		return None

	def ruleswithleftside(self, lhs):
		"""Return rules such as ``lhs -> ...``."""
		return _equalrange(self.rules, lhs, leftsidekey)

	def terminalruleswithrightside(self, word):
		"""Return terminal rules such as ``X -> word``."""
		return [rule for rule in _equalrange(
				self.rulesrightsorted, (word, ), rightsidekey)
				if rule.type == TERMINAL]

	def ruleswithrightside(self, symbol):
		"""Return rules such as ``X -> symbol``, of any type."""
		return _equalrange(self.rulesrightsorted, (symbol, ), rightsidekey)

	def ruleswithtwononterminalsonrightside(self, first, second):
		"""Return rules such as ``X -> first second``."""
		return _equalrange(
				self.rulesrightsorted, (first, second), rightsidekey)

	def partofspeechtags(self):
		"""Return the distinct left-hand sides of terminal rules."""
		return list(dict.fromkeys(
				rule.lhs for rule in self.rules if rule.type == TERMINAL))

	def leftsides(self):
		"""Return the distinct left-hand sides of all rules."""
		return list(dict.fromkeys(rule.lhs for rule in self.rules))

	def _sort(self):
		self.rules.sort(key=rulekey)
		self.rulesrightsorted.sort(key=rightrulekey)

	# === Chomsky Normal Form ===================================
	def tocnf(self):
		"""Convert this grammar to Chomsky Normal Form, in-place.

		First unit productions ``X -> Y`` are eliminated, then right-hand
		sides longer than two symbols are binarized with fresh non-terminals
		``X0, X1, ...``.

		>>> grammar = Grammar([Rule.parse(a) for a in (
		...		'S -> NP VP', 'VP -> V NP PP', 'VP -> V',
		...		'NP -> John', 'V -> sleeps', 'V -> saw', 'PP -> today')])
		>>> print(grammar.tocnf())
		NP -> John
		PP -> today
		S -> NP VP
		V -> saw
		V -> sleeps
		VP -> X0 PP
		VP -> saw
		VP -> sleeps
		X0 -> V NP"""
		nrules = len(self.rules)
		self.removeunitrules()
		logging.debug('eliminated unit rules; %d => %d rules',
				nrules, len(self.rules))
		self.binarize()
		self._sort()
		logging.info('converted to CNF; %d => %d rules', nrules, len(self))
		return self

	def removeunitrules(self):
		"""Replace unit productions ``X -> Y`` by ``X -> beta`` for every rule
		``Y -> beta``.

		Each ``Y`` is eliminated once; unit rules ``X -> X`` are never
		eliminated, and unit rules introduced by a cycle back to an already
		eliminated symbol remain."""
		removed = set()
		candidate = self._unitcandidate(removed)
		while candidate is not None:
			for rule in self.ruleswithrightside(candidate):
				for target in self.ruleswithleftside(candidate):
					self.addrule(self._unitrule(rule, target))
				self.removerule(rule)
			removed.add(candidate)
			candidate = self._unitcandidate(removed)

	def _unitcandidate(self, removed):
		"""Return Y of the first rule such as X -> Y, or None."""
		for rule in self.rules:
			if (rule.type == SINGLE_NON_TERMINAL and not rule.leftrecursive()
					and rule.rhs[0] not in removed):
				return rule.rhs[0]
		return None

	def _unitrule(self, rule, target):
		"""The rule replacing ``rule = X -> Y`` given ``target = Y -> beta``."""
		return self.ruleclass(rule.lhs, list(target.rhs), target.type)

	def binarize(self):
		"""Replace rules such as ``A -> B C D ...`` with ``A -> X0 D ...``
		and ``X0 -> B C``.

		The pair to factor out is always the first two symbols of the first
		remaining long rule; the same pair is then replaced in all long rules
		(the leftmost occurrence in each rule). Rules are modified in-place
		and the indices are left unsorted. The new symbols are added to
		``self.helpers``."""
		self.newsymbols.exclude = ({rule.lhs for rule in self.rules}
				| {symbol for rule in self.rules for symbol in rule.rhs})
		multiple = [rule for rule in self.rules
				if rule.type == MULTIPLE_NON_TERMINAL]
		while multiple:
			first, second = multiple[0].rhs[:2]
			newsymbol = next(self.newsymbols)
			self.helpers.add(newsymbol)
			for rule in multiple:
				rule.replacepair(first, second, newsymbol)
			self.addrule(self._helperrule(newsymbol, [first, second]))
			multiple = [rule for rule in multiple
					if rule.type == MULTIPLE_NON_TERMINAL]

	def _helperrule(self, newsymbol, rhs):
		return self.ruleclass(newsymbol, rhs, TWO_NON_TERMINAL)

	# === Exceptional words =====================================
	def replaceexceptionalwords(self, sent):
		"""Replace numbers and rare words of a sentence with placeholders."""
		return replaceexceptionalwords(sent, self.lexicon, self.mincount)

	def reinsertexceptionalwords(self, tree, sent):
		"""Restore the words of the original sentence in a parse tree."""
		return reinsertexceptionalwords(tree, sent)

	def __len__(self):
		return len(self.rules)

	def __iter__(self):
		return iter(self.rules)

	def __str__(self):
		return '\n'.join(str(rule) for rule in self.rules)

	def __repr__(self):
		return '<%s with %d rules, %d word types, mincount=%d>' % (
				self.__class__.__name__, len(self.rules), len(self.lexicon),
				self.mincount)


class ProbabilisticGrammar(Grammar):
	"""A grammar where each rule has a probability.

	When read off from a treebank, probabilities are relative frequencies of
	the rules with the same left-hand side. Conversion to CNF propagates the
	probabilities: ``X -> beta`` replacing ``X -> Y`` and ``Y -> beta`` gets
	the product of their probabilities, and helper rules introduced by
	binarization get probability 1.

	>>> grammar = ProbabilisticGrammar.fromtreebank([
	...		Tree('(S (NP Mary) (VP walks))'), Tree('(S (NP John) (VP walks))')])
	>>> [str(a) for a in grammar.ruleswithleftside('NP')]
	['NP -> John [0.5]', 'NP -> Mary [0.5]']"""
	ruleclass = ProbabilisticRule

	def countrule(self, rule):
		stored = super(ProbabilisticGrammar, self).countrule(rule)
		stored.increment()
		return stored

	def estimate(self):
		"""Set probabilities to relative frequencies of the rule counts."""
		if not self.rules:
			return
		starts = _lhsstarts(self.rules)
		counts = np.array([rule.count for rule in self.rules], dtype=float)
		totals = np.repeat(np.add.reduceat(counts, starts),
				np.diff(starts + [len(self.rules)]))
		probs = np.divide(counts, totals, out=np.zeros_like(counts),
				where=totals > 0)
		for rule, prob in zip(self.rules, probs):
			rule.prob = float(prob)

	def checkprobabilities(self, epsilon=1e-6):
		"""Check that the probabilities of the rules for each left-hand side
		sum to 1.

		:returns: a dictionary with the left-hand sides that violate this,
			and their sums; empty if the grammar is proper."""
		if not self.rules:
			return {}
		starts = _lhsstarts(self.rules)
		totals = np.add.reduceat(
				np.array([rule.prob for rule in self.rules]), starts)
		return {self.rules[n].lhs: float(total)
				for n, total in zip(starts, totals)
				if abs(total - 1.0) > epsilon}

	def logprob(self, tree):
		"""Log probability of a tree according to this grammar.

		Numbers and rare words in the tree are replaced by their placeholders
		first; the tree should use the rules of the grammar before conversion
		to CNF.

		:raises ValueError: if the tree contains a rule not in the grammar."""
		tree = replaceraretreewords(tree.copy(deep=True),
				self.lexicon, self.mincount)
		return self._logprob(tree)

	def _logprob(self, node):
		rule = torule(node, self.ruleclass)
		stored = None if rule is None else self.searchrule(rule)
		if stored is None:
			raise ValueError('rule not in grammar: %s' % (rule or node.label))
		result = logprob(stored.prob)
		if stored.type != TERMINAL:
			result += sum(self._logprob(child) for child in node
					if isinstance(child, Tree))
		return result

	def _unitrule(self, rule, target):
		return self.ruleclass(rule.lhs, list(target.rhs), target.type,
				prob=rule.prob * target.prob)

	def _helperrule(self, newsymbol, rhs):
		return self.ruleclass(newsymbol, rhs, TWO_NON_TERMINAL, prob=1.0)


def _equalrange(index, value, key):
	"""Return the rules of a sorted index for which ``key(rule) == value``."""
	return index[bisect_left(index, value, key=key):
			bisect_right(index, value, key=key)]


def _lhsstarts(rules):
	"""Indices where a new left-hand side starts in a list sorted by lhs."""
	return [n for n, rule in enumerate(rules)
			if n == 0 or rule.lhs != rules[n - 1].lhs]


def logprob(prob):
	"""Log of a probability, with ``log(0) == -inf``."""
	return log(prob) if prob > 0 else float('-inf')


def torule(node, ruleclass=Rule, trim=True):
	"""Read off the rule for a tree node and its children.

	:param trim: if True, strip function tags from the labels of the node and
		its children; words are never trimmed.
	:returns: a rule, or None if the node or one of its children has no
		label.

	>>> print(torule(Tree('(NP-SBJ (DT the) (NN-HD dog))')))
	NP -> DT NN"""
	if not node.label:
		return None
	rhs = []
	for child in node:
		if isinstance(child, Tree):
			if not child.label:
				return None
			rhs.append(trimsymbol(child.label) if trim else child.label)
		elif child is None:
			return None
		else:
			rhs.append(child)
	return ruleclass(trimsymbol(node.label) if trim else node.label, rhs)


def readrules(lines, ruleclass=Rule):
	"""Read rules from an iterable of lines; blank lines are skipped."""
	return [ruleclass.parse(line) for line in lines if line.strip()]


def readlexicon(lines):
	"""Read word frequencies from lines of the form ``word count``.

	>>> readlexicon(['dog 3', 'barks 1', 'dog 1'])
	Counter({'dog': 4, 'barks': 1})"""
	lexicon = Counter()
	for line in lines:
		fields = line.split()
		if not fields:
			continue
		if len(fields) != 2:
			raise ValueError('expected "word count" in lexicon: %r' % line)
		try:
			lexicon[fields[0]] += int(fields[1])
		except ValueError:
			raise ValueError('malformed count in lexicon: %r' % line)
	return lexicon


def writegrammar(grammar):
	"""Write a grammar in the text formats read by ``Grammar.fromfiles()``.

	Rules are written in the order of the left-hand side index; the lexicon
	lists words in sorted order.

	:returns: tuple of strings ``(rules, lexicon)``"""
	rules = ''.join('%s\n' % rule for rule in grammar)
	lexicon = ''.join('%s %d\n' % (word, count)
			for word, count in sorted(grammar.lexicon.items()))
	return rules, lexicon


__all__ = ['UniqueIDs', 'Grammar', 'ProbabilisticGrammar', 'logprob',
		'torule', 'readrules', 'readlexicon', 'writegrammar']
