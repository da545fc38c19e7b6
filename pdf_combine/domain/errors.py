class PdfCombineError(Exception):
    pass


class ValidationError(PdfCombineError):
    pass


class PageRangeError(ValidationError, IndexError):
    pass


class OpenError(PdfCombineError):
    pass


class MergeError(PdfCombineError):
    pass


class SaveError(PdfCombineError):
    pass


class RenderError(PdfCombineError):
    pass
