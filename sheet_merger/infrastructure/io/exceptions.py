class MergerInfrastructureError(Exception):
    pass


class DataSourceError(MergerInfrastructureError):
    pass


class DataSourceNotFoundError(DataSourceError):
    pass


class DataParseError(DataSourceError):
    pass
