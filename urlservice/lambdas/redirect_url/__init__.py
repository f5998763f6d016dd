from urlservice.utils import initialize_logging


initialize_logging()
