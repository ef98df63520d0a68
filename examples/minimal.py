import sys

import sandvm as svm


def main():
	if len(sys.argv) < 2:
		print("usage: minimal.py INITRD [KERNEL]")
		return 2
	kernel = sys.argv[2] if len(sys.argv) > 2 else None
	print(svm.prepare_payload(sys.argv[1], kernel=kernel).spec.argv)
	outcome = svm.run_payload(sys.argv[1], kernel=kernel)
	print(outcome.kind, outcome.exit_code)
	if outcome.ok:
		print(outcome.output.decode("utf-8", "replace"))
	return outcome.exit_code


if __name__ == "__main__":
	sys.exit(main())
