"""Command-line interfaces to modules."""
import sys

COMMANDS = {
		'grammar': 'Read off a grammar from a treebank.',
		'parser': 'Parse sentences with a grammar.',
	}


def main():
	"""Expose command-line interfaces."""
	from os.path import basename
	thiscmd = basename(sys.argv[0])
	if len(sys.argv) == 2 and sys.argv[1] in ('-v', '--version'):
		from cfgparse import __version__
		print(__version__)
	elif len(sys.argv) <= 1 or sys.argv[1] not in COMMANDS:
		print('Usage: %s <command> [arguments]\n' % thiscmd, file=sys.stderr)
		print('Command is one of:', file=sys.stderr)
		for a, b in COMMANDS.items():
			print('   %s  %s' % (a.ljust(15), b))
		print('for additional instructions issue: %s <command> --help'
			% thiscmd, file=sys.stderr)
	else:
		cmd = sys.argv[1]
		# use the CLI defined here, or default to the module's main function.
		try:
			func = globals()[cmd]
		except KeyError:
			func = getattr(__import__('cfgparse.%s' % cmd,
					fromlist=['main']), 'main')
		func()


def grammar():
	"""Read off a grammar from a treebank in bracket notation.
Usage: cfgparse grammar [options] <treebank> <rules> <lexicon>

Options:
  --prob          estimate rule probabilities (relative frequencies).
  --mincount=n    replace words occurring less than n times with _rare_.
  --cnf           convert the grammar to Chomsky Normal Form.
  --inputenc=x    encoding of the treebank [default: utf8].
  --verbosity=n   0: warnings, 1: info, 2+: debug [default: 2].

Output files ending in .gz are compressed."""
	import logging
	from getopt import gnu_getopt, GetoptError
	from .treebank import readbrackettrees
	from .grammar import Grammar, ProbabilisticGrammar, writegrammar
	from .util import openwrite
	shortoptions = 'h'
	options = ('help', 'prob', 'cnf', 'mincount=', 'inputenc=',
			'verbosity=')
	try:
		opts, args = gnu_getopt(sys.argv[2:], shortoptions, options)
		opts = dict(opts)
		if '-h' in opts or '--help' in opts:
			print(grammar.__doc__)
			return
		treebankfile, rulesfile, lexiconfile = args
		mincount = int(opts.get('--mincount', 1))
		verbosity = int(opts.get('--verbosity', 2))
	except (GetoptError, ValueError) as err:
		print('error: %r' % err, file=sys.stderr)
		print(grammar.__doc__)
		sys.exit(2)
	logging.basicConfig(
			level=(logging.WARNING, logging.INFO, logging.DEBUG)[
				min(max(verbosity, 0), 2)],
			format='%(message)s')
	trees = readbrackettrees(treebankfile,
			encoding=opts.get('--inputenc', 'utf8'))
	if not trees:
		raise ValueError('no trees in %r' % treebankfile)
	cls = ProbabilisticGrammar if '--prob' in opts else Grammar
	xgrammar = cls.fromtreebank(trees, mincount)
	if '--cnf' in opts:
		xgrammar.tocnf()
	rules, lexicon = writegrammar(xgrammar)
	with openwrite(rulesfile) as out:
		out.write(rules)
	with openwrite(lexiconfile) as out:
		out.write(lexicon)
	logging.info('wrote grammar to %s and %s', rulesfile, lexiconfile)


__all__ = ['main', 'grammar']
