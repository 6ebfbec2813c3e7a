from .lambda_invoker import LambdaInvoker as LambdaInvoker
from .local_invoker import LocalInvoker as LocalInvoker
