class SVMConfigurationError(Exception):
	pass


class SVMLaunchError(Exception):
	pass


class SVMTimeout(Exception):
	pass


class SVMProtocolError(Exception):
	def __init__(self, message: str, exit_code: int = 99):
		super().__init__(message)
		self.exit_code = exit_code


class SVMGuestFailure(Exception):
	def __init__(self, message: str, exit_code: int | None = None):
		super().__init__(message)
		self.exit_code = exit_code
