"""kubeobject: cross-resource references, field-path patching and
management policies for the Object managed resource."""

__version__ = "0.1.0"
