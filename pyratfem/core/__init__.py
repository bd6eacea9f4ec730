from .mesh import Mesh
from .topology import Node, Element, ELEMENT_DIM
__all__=['Mesh','Node','Element','ELEMENT_DIM']
