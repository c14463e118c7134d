"""Parser object that replaces rare words, parses, and restores the sentence.

Additionally, a simple command line interface similar to bitpar."""
import io
import os
import sys
import logging
from math import exp
from time import process_time
from getopt import gnu_getopt, GetoptError
from . import cyk
from .grammar import Grammar, ProbabilisticGrammar
from .util import openread, openwrite

SHORTUSAGE = '''
usage: cfgparse parser [options] <rules> <lexicon> [input [output]]'''

DEFAULTS = dict(
	start='S',  # label of the root node of complete parses
	mincount=1,  # words occurring less often are replaced by _rare_
	prob=False,  # use a probabilistic grammar and Viterbi parsing
	cnf=True,  # convert grammar to Chomsky Normal Form before parsing
	numparses=1,  # maximum number of trees to write per sentence; 0: all
	verbosity=2,  # 0: warnings, 1: info, 2+: debug
	encoding='utf8')  # encoding of grammar and input files


class DictObj(object):
	"""Trivial class to wrap a dictionary for reasons of syntactic sugar."""

	def __init__(self, *args, **kwds):
		self.__dict__.update(*args, **kwds)

	def update(self, *args, **kwds):
		"""Update/add more attributes."""
		self.__dict__.update(*args, **kwds)

	def __getattr__(self, name):
		"""Dummy function for suppressing pylint E1101 errors."""
		raise AttributeError('%r instance has no attribute %r.\n'
				'Available attributes: %r' % (
				self.__class__.__name__, name, list(self.__dict__)))

	def __repr__(self):
		return '%s(%s)' % (self.__class__.__name__,
			',\n\t'.join('%s=%r' % a for a in self.__dict__.items()))


class Parser(object):
	"""A CYK parser for sentences of arbitrary words.

	Numbers and rare words are replaced by placeholders before parsing, and
	restored in the resulting trees.

	:param grammar: a Grammar or ProbabilisticGrammar in Chomsky Normal Form.
	:param start: the label of the root node of complete parses.
	:param prob: whether to return only the most probable parse trees;
		by default, this is the case for a ProbabilisticGrammar.

	>>> from cfgparse.rule import Rule
	>>> grammar = Grammar([Rule.parse(a) for a in ('S -> NP VP',
	...		'NP -> _rare_', 'VP -> walks')], lexicon={'walks': 1})
	>>> parser = Parser(grammar)
	>>> print(parser.parse(['Mary', 'walks'])[0])
	(S (NP Mary) (VP walks))
	"""

	def __init__(self, grammar, start='S', prob=None):
		self.grammar = grammar
		self.start = start
		self.prob = (isinstance(grammar, ProbabilisticGrammar)
				if prob is None else prob)

	def parse(self, sent):
		"""Parse a sentence.

		:param sent: a sequence of words.
		:returns: a list of trees whose leaves are the words of ``sent``;
			empty if there is no parse."""
		sent = list(sent)
		words = self.grammar.replaceexceptionalwords(sent)
		if self.prob:
			trees = cyk.viterbiparse(words, self.grammar, self.start)
		else:
			trees = cyk.parse(words, self.grammar, self.start)
		return [self.grammar.reinsertexceptionalwords(tree, sent)
				for tree in trees]

	def __repr__(self):
		return '%s(%r, start=%r, prob=%r)' % (self.__class__.__name__,
				self.grammar, self.start, self.prob)


def loadgrammar(rulefile, lexiconfile, prm):
	"""Read grammar files and prepare the grammar for parsing.

	:param prm: a DictObj with the keys of ``DEFAULTS``."""
	cls = ProbabilisticGrammar if prm.prob else Grammar
	grammar = cls.fromfiles(rulefile, lexiconfile, prm.mincount,
			encoding=prm.encoding)
	if prm.prob:
		for lhs, total in grammar.checkprobabilities().items():
			logging.warning('probabilities of rules for %s sum to %g',
					lhs, total)
	if prm.cnf:
		grammar.tocnf()
	return grammar


def readparam(filename):
	"""Parse a parameter file.

	:param filename: The file should contain a list of comma-separated
		``attribute=value`` pairs and will be read using ``eval('dict(%s)' %
		open(file).read())``.
	:returns: A DictObj, with defaults for missing parameters."""
	with io.open(filename, encoding='utf8') as fileobj:
		params = eval('dict(%s)' % fileobj.read())  # pylint: disable=eval-used
	return makeparams(params)


def makeparams(params):
	"""Validate parameters and add defaults for missing ones.

	>>> makeparams(dict(prob=True)).start
	'S'
	>>> makeparams(dict(beamwidth=5))
	Traceback (most recent call last):
	...
	ValueError: unrecognized option: 'beamwidth'"""
	for key in params:
		if key not in DEFAULTS:
			raise ValueError('unrecognized option: %r' % key)
	if params.get('numparses', 1) < 0:
		raise ValueError('numparses should be >= 0: %r' % params['numparses'])
	return DictObj({k: params.get(k, v) for k, v in DEFAULTS.items()})


def worker(parser, key, line, numparses, printprob):
	"""Parse a single sentence.

	:returns: a tuple ``(output, noparse, sec, msg)``."""
	begin = process_time()
	sent = line.split()
	msg = 'parsing %s: %s' % (key, ' '.join(sent))
	trees = parser.parse(sent)
	output = ''
	if not trees:
		msg += '\nNo parse for "%s"' % ' '.join(sent)
		output = '\n'
	for tree in trees[:numparses or None]:
		if printprob:
			output += 'prob=%.16g\n' % exp(tree.prob)
		output += '%s\n' % tree
	sec = process_time() - begin
	msg += '\n%g s' % sec
	return output, not trees, sec, msg


def doparsing(parser, infile, out, numparses=1, printprob=False):
	"""Parse sentences from file and write results to file, log messages.

	:param infile: an iterable of lines, with one tokenized sentence per
		line; blank lines are skipped.
	:param out: a file object for the bracketed trees.
	:returns: the number of sentences without a parse."""
	times = []
	unparsed = 0
	lines = (line for line in infile if line.strip())
	for key, line in enumerate(lines, 1):
		output, noparse, sec, msg = worker(
				parser, key, line, numparses, printprob)
		logging.info(msg)
		out.write(output)
		out.flush()
		if noparse:
			unparsed += 1
		times.append(sec)
	if times:
		logging.info('average time per sentence %g\nunparsed sentences: %d',
				sum(times) / len(times), unparsed)
	logging.info('finished')
	return unparsed


def main():
	"""Handle command line arguments."""
	flags = 'help prob nocnf'.split()
	options = flags + 'mincount= param= verbosity= encoding='.split()
	try:
		opts, args = gnu_getopt(sys.argv[2:], 'hb:s:', options)
	except GetoptError as err:
		print('error:', err, file=sys.stderr)
		print(SHORTUSAGE)
		sys.exit(2)
	opts = dict(opts)
	if '-h' in opts or '--help' in opts:
		print(SHORTUSAGE)
		return
	if not 2 <= len(args) <= 4:
		print('error: incorrect number of arguments', file=sys.stderr)
		print(SHORTUSAGE)
		sys.exit(2)
	for n, filename in enumerate(args[:2]):
		if not os.path.exists(filename):
			raise ValueError('file %d not found: %r' % (n + 1, filename))
	prm = readparam(opts['--param']) if '--param' in opts else makeparams({})
	if '--prob' in opts:
		prm.update(prob=True)
	if '--nocnf' in opts:
		prm.update(cnf=False)
	if '-s' in opts:
		prm.update(start=opts['-s'])
	if '-b' in opts:
		prm.update(numparses=int(opts['-b']))
	for key in ('mincount', 'verbosity'):
		if '--' + key in opts:
			prm.update({key: int(opts['--' + key])})
	if '--encoding' in opts:
		prm.update(encoding=opts['--encoding'])
	logging.basicConfig(
			level=(logging.WARNING, logging.INFO, logging.DEBUG)[
				min(max(prm.verbosity, 0), 2)],
			format='%(message)s')
	grammar = loadgrammar(args[0], args[1], prm)
	parser = Parser(grammar, start=prm.start, prob=prm.prob)
	with openread(args[2] if len(args) >= 3 else '-',
			encoding=prm.encoding) as infile:
		with openwrite(args[3] if len(args) == 4 else '-',
				encoding=prm.encoding) as out:
			doparsing(parser, infile, out, prm.numparses, prm.prob)


__all__ = ['DEFAULTS', 'DictObj', 'Parser', 'loadgrammar', 'readparam',
		'makeparams', 'worker', 'doparsing', 'main']
