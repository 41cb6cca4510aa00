class FedIdpError(Exception):
    pass


class ConfigurationInvalid(FedIdpError):
    pass


class ConfigurationSyntaxError(FedIdpError):
    pass


class ElementBuildError(FedIdpError):
    pass


class UnsupportedAlgorithm(FedIdpError):
    pass
