from fsitem.util.fd import *
from fsitem.util.oo import *
from fsitem.util.strbytes import *
from fsitem.util.tabulate import *
from fsitem.util.time import *
