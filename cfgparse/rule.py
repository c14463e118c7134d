"""Rules of a context-free grammar, their types and orderings.

A rule has a left-hand side symbol and a non-empty sequence of right-hand
side symbols; symbols are plain strings. Each rule is classified into one of
four types, depending on the shape of its right-hand side:

- ``TERMINAL``: ``X -> a``, a single terminal symbol.
- ``SINGLE_NON_TERMINAL``: ``X -> Y``, a unit production.
- ``TWO_NON_TERMINAL``: ``X -> Y Z``.
- ``MULTIPLE_NON_TERMINAL``: ``X -> Y Z ...`` with three or more symbols.

The key functions in this module define the orderings of the two rule indices
maintained by a grammar; right-hand sides compare lexicographically symbol by
symbol, with a shorter sequence sorting before its extensions."""
import re
from .punctuation import ispunct

TERMINAL, SINGLE_NON_TERMINAL, TWO_NON_TERMINAL, MULTIPLE_NON_TERMINAL = range(4)
RULETYPES = ('Terminal', 'SingleNonTerminal', 'TwoNonTerminal',
		'MultipleNonTerminal')
ARROW = '->'
# a trailing bracketed probability: NP -> DT NN [0.25]
PROBRE = re.compile(r'\[([^\[\]\s]+)\]\s*$')


class Rule(object):
	"""A rule ``lhs -> rhs[0] rhs[1] ...`` of a context-free grammar.

	:param lhs: the left-hand side symbol.
	:param rhs: a non-empty sequence of symbols; a single string is
		interpreted as a right-hand side of length 1.
	:param ruletype: one of the four rule type constants; None until the
		rule is classified by its grammar.

	>>> rule = Rule.parse('S -> NP VP')
	>>> rule.lhs, rule.rhs
	('S', ['NP', 'VP'])
	>>> print(rule)
	S -> NP VP
	"""
	__slots__ = ('lhs', 'rhs', 'type')

	def __init__(self, lhs, rhs, ruletype=None):
		if isinstance(rhs, str):
			rhs = [rhs]
		if not lhs:
			raise ValueError('rule without left-hand side: %r' % (rhs, ))
		self.lhs = lhs
		self.rhs = list(rhs)
		if not self.rhs:
			raise ValueError('rule with empty right-hand side: %r' % lhs)
		self.type = ruletype

	@classmethod
	def parse(cls, line):
		"""Create a rule from a line such as ``NP -> DT NN``.

		A trailing bracketed probability is ignored."""
		lhs, rhs, _ = splitrule(line)
		return cls(lhs, rhs)

	def leftrecursive(self):
		"""Test whether this is a unit production ``X -> X``."""
		return self.type == SINGLE_NON_TERMINAL and self.rhs[0] == self.lhs

	def replacepair(self, first, second, new):
		"""Replace the leftmost adjacent pair ``first second`` with ``new``.

		Only the first occurrence is replaced. When the right-hand side
		shrinks to two symbols, the rule becomes a ``TWO_NON_TERMINAL`` rule.

		:returns: True if a replacement was made.

		>>> rule = Rule('A', 'B C D'.split(), MULTIPLE_NON_TERMINAL)
		>>> rule.replacepair('C', 'D', 'X0'), str(rule), rule.typename()
		(True, 'A -> B X0', 'TwoNonTerminal')"""
		for n in range(len(self.rhs) - 1):
			if self.rhs[n] == first and self.rhs[n + 1] == second:
				self.rhs[n:n + 2] = [new]
				if len(self.rhs) == 2:
					self.type = TWO_NON_TERMINAL
				return True
		return False

	def typename(self):
		"""Human readable name of the type of this rule."""
		return None if self.type is None else RULETYPES[self.type]

	def __repr__(self):
		return '%s(%r, %r, %s)' % (self.__class__.__name__,
				self.lhs, self.rhs, self.typename())

	def __str__(self):
		return '%s %s %s' % (self.lhs, ARROW, ' '.join(self.rhs))


class ProbabilisticRule(Rule):
	"""A rule with a probability.

	The count attribute holds a frequency that is only used while estimating
	relative frequencies from a treebank.

	>>> rule = ProbabilisticRule.parse('NP -> DT NN [0.25]')
	>>> rule.rhs, rule.prob
	(['DT', 'NN'], 0.25)
	>>> print(rule)
	NP -> DT NN [0.25]
	"""
	__slots__ = ('prob', 'count')

	def __init__(self, lhs, rhs, ruletype=None, prob=0.0):
		super(ProbabilisticRule, self).__init__(lhs, rhs, ruletype)
		self.prob = prob
		self.count = 0

	@classmethod
	def parse(cls, line):
		"""Create a rule from a line such as ``NP -> DT NN [0.25]``."""
		lhs, rhs, prob = splitrule(line)
		if prob is None:
			raise ValueError('expected probability in brackets: %r' % line)
		try:
			prob = float(prob)
		except ValueError:
			raise ValueError('malformed probability %r in rule: %r' % (
					prob, line))
		if not 0 <= prob <= 1:
			raise ValueError('probability out of range: %r' % line)
		return cls(lhs, rhs, prob=prob)

	def increment(self):
		"""Count one more occurrence of this rule."""
		self.count += 1

	def normalize(self, total):
		"""Set probability to relative frequency w.r.t. ``total``."""
		self.prob = self.count / total

	def __repr__(self):
		return '%s(%r, %r, %s, prob=%r)' % (self.__class__.__name__,
				self.lhs, self.rhs, self.typename(), self.prob)

	def __str__(self):
		return '%s [%.16g]' % (Rule.__str__(self), self.prob)


def splitrule(line):
	"""Split a rule text line in its parts.

	:returns: a tuple ``(lhs, rhs, prob)`` where ``rhs`` is a list of symbols
		and ``prob`` is the string between brackets, or None.

	>>> splitrule('VP -> V NP PP [0.5]')
	('VP', ['V', 'NP', 'PP'], '0.5')"""
	lhs, arrow, rhs = line.partition(ARROW)
	if not arrow:
		raise ValueError('expected %r in rule: %r' % (ARROW, line))
	lhs = lhs.strip()
	if not lhs or len(lhs.split()) != 1:
		raise ValueError('expected a single left-hand side symbol: %r' % line)
	prob = None
	match = PROBRE.search(rhs)
	if match is not None:
		prob = match.group(1)
		rhs = rhs[:match.start()]
	rhs = rhs.split()
	if not rhs:
		raise ValueError('rule with empty right-hand side: %r' % line)
	return lhs, rhs, prob


def leftsidekey(rule):
	"""Order rules by their left-hand side."""
	return rule.lhs


def rightsidekey(rule):
	"""Order rules by their right-hand side, lexicographically."""
	return tuple(rule.rhs)


def rulekey(rule):
	"""Order rules by left-hand side, ties broken by right-hand side.

	>>> rules = [Rule('NP', 'DT NN'.split()), Rule('NP', 'DT'), Rule('ADJP', 'JJ')]
	>>> [str(a) for a in sorted(rules, key=rulekey)]
	['ADJP -> JJ', 'NP -> DT', 'NP -> DT NN']"""
	return rule.lhs, tuple(rule.rhs)


def rightrulekey(rule):
	"""Order rules by right-hand side, ties broken by left-hand side."""
	return tuple(rule.rhs), rule.lhs


def isterminal(symbol):
	"""Naming convention for terminals: punctuation, or anything containing
	a lowercase letter (words, and the placeholders ``_num_``, ``_rare_``).

	>>> isterminal('dog'), isterminal('_rare_'), isterminal('NP')
	(True, True, False)"""
	return ispunct(symbol) or any(char.islower() for char in symbol)


def classify(rule, nonterminals):
	"""Return the type of rule given the set of known non-terminals.

	>>> nonterminals = {'S', 'NP', 'VP'}
	>>> RULETYPES[classify(Rule('S', ['VP']), nonterminals)]
	'SingleNonTerminal'
	>>> RULETYPES[classify(Rule('NP', ['Fido']), nonterminals)]
	'Terminal'"""
	if len(rule.rhs) > 2:
		return MULTIPLE_NON_TERMINAL
	elif len(rule.rhs) == 2:
		return TWO_NON_TERMINAL
	symbol = rule.rhs[0]
	if (isterminal(symbol) or ispunct(symbol)
			or symbol not in nonterminals):
		return TERMINAL
	return SINGLE_NON_TERMINAL


def trimsymbol(label):
	"""Strip function tags and indices from a treebank label.

	Labels starting with a dash, such as ``-NONE-``, are left alone.

	>>> trimsymbol('NP-SBJ'), trimsymbol('NP=2'), trimsymbol('-NONE-')
	('NP', 'NP', '-NONE-')"""
	for char in '-=':
		x = label.find(char)
		if x > 0:
			label = label[:x]
	return label


__all__ = ['Rule', 'ProbabilisticRule', 'TERMINAL', 'SINGLE_NON_TERMINAL',
		'TWO_NON_TERMINAL', 'MULTIPLE_NON_TERMINAL', 'RULETYPES', 'splitrule',
		'leftsidekey', 'rightsidekey', 'rulekey', 'rightrulekey',
		'isterminal', 'classify', 'trimsymbol']
