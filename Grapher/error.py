# error.py


class GrapherError(Exception):
    def __init__(self, message, code="9999", formula=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.formula = formula

class FormulaSyntaxError(GrapherError):
    pass

class InvalidFormulaError(GrapherError):
    pass

class ConfigurationError(GrapherError):
    pass

class RenderError(GrapherError):
    pass



INVALID_FORMULA_MESSAGE = "Invalid formula. Please check your syntax."


Error_Dictionary = {

    "1" : "Missing Files",
    "3" : "Formula Error",
    "4" : "UI Error",
    "5" : "Configuration Error",
    "6" : "Render Error",
    "7" : "Runtime Error"

}

def error_area(code):
    """Return the area name for an error code, taken from its first digit."""
    return Error_Dictionary.get(str(code)[:1], Error_Dictionary["7"])


#Error Messages are structured in:
# 1. Digit: Main Error
# 2. Digit: Specification
# 3. and 4. Digit: Error Number



ERROR_MESSAGES = {
    "3000" : "Invalid formula. Please check your syntax.",
    "3001" : "Empty formula.",
    "3002" : "More than one '.' in one number.",
    "3003" : "Missing ')'. ",
    "3004" : "Unexpected Token: ", # + Token
    "3005" : "Missing Number.",
    "3006" : "Unexpected end of formula after: ", # + Operator
    "3007" : "Formula nested too deeply.",
    "3008" : "Unknown Operator: ", # + operator
    "3109" : "Formula could not be evaluated at x = 0.",


    "4000" : "No formula entered.",
    "4001" : "Clipboard not available.",


    "5000" : "Invalid value for setting: ", # + key
    "5001" : "Settings could not be saved.",


    "6000" : "Drawing surface not available.",


    "9999" : "Unexpected Error: " #+error
}
