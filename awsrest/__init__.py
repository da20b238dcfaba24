from awsrest.utils import Credentials, Region, credentials_from_env, resolve_url
from awsrest.signer import Signer, NormalizedHeader, normalize_headers, string_to_sign
from awsrest.request import Request, PreparedRequest
from awsrest.client import Client
from awsrest.s3 import PutObject, GetObject, DeleteObject, AclGrantee
from awsrest.ses import SendEmail
from awsrest.exceptions import AWSRESTError, ConfigurationError, RequestBuildError, SigningError, ServiceError

__version__ = '0.1.0'
