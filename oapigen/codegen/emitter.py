"""Go source emission from the intermediate representation.

``GoEmitter`` turns an ``API`` into the files of a Go client package:

- ``doc.go``: package synopsis
- ``client.go``: version constants, the root ``Service`` and its constructor,
  optionally the gzip-compressed schema descriptor
- ``api_<service>.go``: one per service, with a call type per method
- ``model_<name>.go``: one per model
- ``utils.go``: request helpers shared by all calls

``write_files`` persists the result.
"""

import gzip
import json
import logging
import re
import shutil
import subprocess
from pathlib import Path

from upath import UPath

from oapigen.codegen.extractor import PLACEHOLDER
from oapigen.codegen.ir import (
    API,
    CALL_SUFFIX,
    Method,
    Model,
    Parameter,
    ParameterLocation,
    Property,
    Service,
)
from oapigen.codegen.naming import article_for, normalize, sentence, to_snake_case
from oapigen.exceptions import CodeGenerationError, OutputError
from oapigen.openapi.v3 import OpenAPI

logger = logging.getLogger(__name__)

__all__ = ['GoEmitter', 'write_files', 'GENERATED_HEADER']

GENERATED_HEADER = '// Code generated by oapigen. DO NOT EDIT.'

DOC_FILE_NAME = 'doc.go'
CLIENT_FILE_NAME = 'client.go'
UTILS_FILE_NAME = 'utils.go'

GO_KEYWORDS = frozenset(
    {
        'break',
        'case',
        'chan',
        'const',
        'continue',
        'default',
        'defer',
        'else',
        'fallthrough',
        'for',
        'func',
        'go',
        'goto',
        'if',
        'import',
        'interface',
        'map',
        'package',
        'range',
        'return',
        'select',
        'struct',
        'switch',
        'type',
        'var',
    }
)

# Names the generated call code uses itself: struct fields, receivers,
# locals and imported packages.
RESERVED_LOCALS = frozenset(
    {
        's',
        'c',
        'r',
        'header',
        'params',
        'ctx',
        'uri',
        'data',
        'err',
        'ret',
        'v',
        'context',
        'fmt',
        'http',
        'url',
        'time',
        'os',
    }
)

RESERVED_CALL_METHODS = frozenset({'Do'})

# Package-level types every generated client declares.
RESERVED_TYPES = frozenset({'Service', 'APIError'})

DESCRIPTOR_BYTES_PER_LINE = 16

# Any generator's marker, per the Go convention for generated files.
_GENERATED_MARKER = re.compile(r'^// Code generated .* DO NOT EDIT\.$', re.MULTILINE)

_NILLABLE_PREFIXES = ('[]', 'map[', '*', 'interface{}')

_UTILS_SOURCE = '''\
// APIError is returned by Do when the server answers with a non-2xx status.
type APIError struct {
	StatusCode int
	Status     string
	Body       []byte
}

func (e *APIError) Error() string {
	return fmt.Sprintf("%s: %s", e.Status, bytes.TrimSpace(e.Body))
}

// buildURL joins the base path and the request path and appends the query.
func buildURL(basePath, p string, params url.Values) string {
	uri := strings.TrimRight(basePath, "/") + "/" + strings.TrimLeft(p, "/")
	if len(params) > 0 {
		uri += "?" + params.Encode()
	}
	return uri
}

// doRequest sends a request and returns the body of a 2xx response.
func doRequest(ctx context.Context, s *Service, method, uri string, header http.Header, body io.Reader) ([]byte, error) {
	req, err := http.NewRequestWithContext(ctx, method, uri, body)
	if err != nil {
		return nil, err
	}
	for k, v := range header {
		req.Header[k] = v
	}
	req.Header.Set("User-Agent", s.userAgent())
	req.Header.Set("Accept", "application/json")

	resp, err := s.client.Do(req)
	if err != nil {
		return nil, err
	}
	defer resp.Body.Close()

	data, err := io.ReadAll(resp.Body)
	if err != nil {
		return nil, err
	}
	if resp.StatusCode < 200 || resp.StatusCode > 299 {
		return nil, &APIError{StatusCode: resp.StatusCode, Status: resp.Status, Body: data}
	}
	return data, nil
}

// decodeJSON unmarshals data into v. An empty body leaves v untouched.
func decodeJSON(data []byte, v interface{}) error {
	if len(bytes.TrimSpace(data)) == 0 {
		return nil
	}
	return json.Unmarshal(data, v)
}
'''

_UTILS_IMPORTS = (
    'bytes',
    'context',
    'encoding/json',
    'fmt',
    'io',
    'net/http',
    'net/url',
    'strings',
)

_DESCRIPTOR_SOURCE = '''\
// SchemaDescriptor returns the schema document this package was generated from.
func SchemaDescriptor() (interface{}, error) {
	zr, err := gzip.NewReader(bytes.NewReader(fileDescriptor))
	if err != nil {
		return nil, err
	}

	var buf bytes.Buffer
	if _, err := buf.ReadFrom(zr); err != nil {
		return nil, err
	}

	var v interface{}
	if err := json.Unmarshal(buf.Bytes(), &v); err != nil {
		return nil, err
	}
	return v, nil
}
'''


class GoEmitter:
    """Emits the Go client package of one ``API``.

    Args:
        api: The extracted intermediate representation.
        package: Go package name of the generated code.
        document: The source document, embedded as schema descriptor when
            ``embed_schema`` is set.
        embed_schema: Emit ``SchemaDescriptor()`` into ``client.go``.
        format_code: Run ``gofmt`` over every file when it is installed.
    """

    def __init__(
        self,
        api: API,
        package: str,
        document: OpenAPI | None = None,
        embed_schema: bool = True,
        format_code: bool = True,
    ):
        self.api = api
        self.package = package
        self.document = document
        self.embed_schema = embed_schema and document is not None
        self.format_code = format_code
        self._gofmt = shutil.which('gofmt') if format_code else None
        self._model_names = {model.name for model in api.models}

    def emit(self) -> dict[str, str]:
        """Generate all files.

        Returns:
            Mapping of file name to Go source.

        Raises:
            CodeGenerationError: A file could not be generated.
        """
        files: dict[str, str] = {}
        self._add(files, DOC_FILE_NAME, self.emit_doc)
        self._add(files, CLIENT_FILE_NAME, self.emit_client)
        for service in self.api.services:
            self._add(files, api_file_name(service.name), self.emit_service, service)
        for model in self.api.models:
            self._add(files, model_file_name(model.name), self.emit_model, model)
        self._add(files, UTILS_FILE_NAME, self.emit_utils)
        return files

    def _add(self, files: dict[str, str], filename: str, build, *args) -> None:
        if filename in files:
            raise CodeGenerationError(
                f'Duplicate output file {filename}', context=filename
            )
        try:
            source = build(*args)
        except Exception as e:
            raise CodeGenerationError('Failed to generate Go source', context=filename, cause=e)
        files[filename] = self._format_source(source, filename)

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def emit_doc(self) -> str:
        title = self.api.title or normalize(self.package, True)
        return '\n'.join(
            [
                GENERATED_HEADER,
                '',
                f'// Package {self.package} provides access to the {title} REST API.',
                f'package {self.package}',
                '',
            ]
        )

    def emit_client(self) -> str:
        out = self._preamble()
        imports = {'net/http'}
        if self.embed_schema:
            imports |= {'bytes', 'compress/gzip', 'encoding/json'}
        out += _imports(imports)

        display = normalize(self.package, True)
        out += [
            'const (',
            f'\tAPIVersion = {_go_string(self.api.version)}',
            '\tUserAgent = "oapigen/" + APIVersion',
            ')',
            '',
            'const (',
            f'\tbasePath = {_go_string(self.api.base_path)}',
            ')',
            '',
            f'// Service represents a {display} Service.',
            'type Service struct {',
            '\tclient *http.Client',
            '\tBasePath string // API endpoint base URL',
            '\tUserAgent string // optional additional User-Agent fragment',
        ]
        if self.api.services:
            out.append('')
        for service in self.api.services:
            out.append(f'\t{service.name} *{self._service_type(service)}')
        out += [
            '}',
            '',
            f'// NewService creates a new {display} Service. A nil client uses',
            '// http.DefaultClient.',
            'func NewService(client *http.Client) *Service {',
            '\tif client == nil {',
            '\t\tclient = http.DefaultClient',
            '\t}',
            '\tsvc := &Service{client: client, BasePath: basePath}',
        ]
        for service in self.api.services:
            out.append(f'\tsvc.{service.name} = New{self._service_type(service)}(svc)')
        out += [
            '\treturn svc',
            '}',
            '',
            'func (s *Service) userAgent() string {',
            '\tif s.UserAgent == "" {',
            '\t\treturn UserAgent',
            '\t}',
            '\treturn UserAgent + " " + s.UserAgent',
            '}',
            '',
        ]
        if self.embed_schema:
            out.append(_DESCRIPTOR_SOURCE)
            out += self._descriptor_bytes()
        return '\n'.join(out)

    def emit_service(self, service: Service) -> str:
        out = self._preamble()
        out += _imports(self._service_imports(service))
        svc_type = self._service_type(service)

        if service.description:
            description = sentence(service.description)
            out.append(
                f'// {svc_type} represents {article_for(description)} {description}'
            )
        else:
            out.append(
                f'// {svc_type} groups the operations of the {service.raw_name} service.'
            )
        out += [
            f'type {svc_type} struct {{',
            '\ts *Service',
            '}',
            '',
            f'// New{svc_type} returns the new {svc_type}.',
            f'func New{svc_type}(s *Service) *{svc_type} {{',
            f'\trs := &{svc_type}{{s: s}}',
            '\treturn rs',
            '}',
            '',
        ]
        for method in service.methods:
            out += self._method(service, method)
        return '\n'.join(out)

    def emit_model(self, model: Model) -> str:
        out = self._preamble()
        out += _imports(_type_imports(self._model_types(model)))

        if model.description:
            description = sentence(model.description)
            doc = f'{article_for(description)} {description}'
        else:
            doc = f'a model of {normalize(model.raw_name, False)}.'
        out.append(f'// {model.name} represents {doc}')

        if model.is_alias:
            out += [f'type {model.name} {model.alias_type}', '']
            return '\n'.join(out)

        out += _struct(model.name, model.properties)
        receiver = model.name[:1].lower() or 'm'
        for prop in model.properties:
            out += _accessors(model.name, receiver, prop)
        return '\n'.join(out)

    def emit_utils(self) -> str:
        out = self._preamble()
        out += _imports(set(_UTILS_IMPORTS))
        out.append(_UTILS_SOURCE)
        return '\n'.join(out)

    # ------------------------------------------------------------------
    # Methods
    # ------------------------------------------------------------------

    def _method(self, service: Service, method: Method) -> list[str]:
        call = method.call_type(service.name)
        summary = sentence(method.summary) if method.summary else ''
        response_type, response_decl = self._response_type(call, method)
        out: list[str] = []

        if response_decl:
            out += response_decl

        if summary:
            out.append(f'// {call} provides the {summary}')
        else:
            out.append(f'// {call} is the call of {method.verb} {method.path}.')
        out += [
            f'type {call} struct {{',
            '\ts *Service',
            '\theader http.Header',
            '\tparams url.Values',
        ]
        if method.path_params:
            out += ['', '\t// path fields']
            for param in method.path_params:
                out.append(f'\t{_local(param.name)} {param.type}')
        out += ['}', '']

        if summary:
            out.append(f'// {method.name} returns the {call} for {summary}')
        else:
            out.append(f'// {method.name} returns a new {call}.')
        if method.deprecated:
            out += ['//', '// Deprecated: the operation is marked as deprecated.']
        args = ', '.join(f'{_local(p.name)} {p.type}' for p in method.path_params)
        out += [
            f'func (r *{self._service_type(service)}) {method.name}({args}) *{call} {{',
            f'\tc := &{call}{{',
            '\t\ts: r.s,',
            '\t\theader: make(http.Header),',
            '\t\tparams: url.Values{},',
        ]
        for param in method.path_params:
            out.append(f'\t\t{_local(param.name)}: {_local(param.name)},')
        out += ['\t}', '\treturn c', '}', '']

        setters: set[str] = set(RESERVED_CALL_METHODS)
        for param in method.query_params + method.header_params + method.cookie_params:
            out += _setter(call, param, setters)

        out += [
            f'// Do executes the {service.name}{method.name} call.',
            f'func (c *{call}) Do(ctx context.Context) ({response_type}, error) {{',
            f'\tvar ret {response_type}',
            f'\turi := buildURL(c.s.BasePath, {_path_expression(method)}, c.params)',
            f'\tdata, err := doRequest(ctx, c.s, {_http_method(method.verb)}, uri, c.header, nil)',
            '\tif err != nil {',
            '\t\treturn ret, err',
            '\t}',
            '\tif err := decodeJSON(data, &ret); err != nil {',
            '\t\treturn ret, err',
            '\t}',
            '\treturn ret, nil',
            '}',
            '',
        ]
        return out

    def _response_type(self, call: str, method: Method) -> tuple[str, list[str]]:
        """Go type returned by ``Do`` and the declaration of an inline response."""
        if method.response_properties:
            name = f'{call[:-len(CALL_SUFFIX)]}Response'
            decl = [f'// {name} is the response of {call}.']
            decl += _struct(name, method.response_properties)
            return f'*{name}', decl
        if method.response_type is None:
            return 'interface{}', []
        if self._is_struct(method.response_type):
            return f'*{method.response_type}', []
        return method.response_type, []

    def _service_type(self, service: Service) -> str:
        """Go type of a service; clashes with a model or a fixed type get a suffix."""
        if service.name in self._model_names or service.name in RESERVED_TYPES:
            return service.name + 'Service'
        return service.name

    def _is_struct(self, type_name: str) -> bool:
        return any(
            model.name == type_name and not model.is_alias for model in self.api.models
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _preamble(self) -> list[str]:
        return [GENERATED_HEADER, '', f'package {self.package}', '']

    def _service_imports(self, service: Service) -> set[str]:
        if not service.methods:
            return set()
        imports = {'context', 'net/http', 'net/url'}
        types = []
        for method in service.methods:
            if method.parameters:
                imports.add('fmt')
            types += [p.type for p in method.parameters]
            types += [p.type for p in method.response_properties]
            if method.response_type:
                types.append(method.response_type)
        return imports | _type_imports(types)

    def _model_types(self, model: Model) -> list[str]:
        if model.is_alias:
            return [model.alias_type]
        return [prop.type for prop in model.properties]

    def _descriptor_bytes(self) -> list[str]:
        document = self.document.model_dump(by_alias=True, exclude_none=True, mode='json')
        raw = json.dumps(document, separators=(',', ':'), sort_keys=True).encode('utf-8')
        data = gzip.compress(raw, compresslevel=9, mtime=0)

        out = [
            '// fileDescriptor is the gzipped JSON of the schema document.',
            'var fileDescriptor = []byte{',
            f'\t// {len(data)} bytes of a gzipped schema descriptor',
        ]
        for i in range(0, len(data), DESCRIPTOR_BYTES_PER_LINE):
            chunk = data[i:i + DESCRIPTOR_BYTES_PER_LINE]
            out.append('\t' + ' '.join(f'0x{b:02x},' for b in chunk))
        out += ['}', '']
        return out

    def _format_source(self, source: str, filename: str) -> str:
        """Format Go source with gofmt if available.

        Returns:
            Formatted source code, or the original when gofmt is unavailable
            or rejects the source.
        """
        if not self._gofmt:
            return source
        try:
            result = subprocess.run(
                [self._gofmt],
                input=source,
                capture_output=True,
                text=True,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning(f'gofmt failed for {filename}: {e}')
            return source
        if result.returncode != 0:
            logger.warning(f'gofmt rejected {filename}: {result.stderr.strip()}')
            return source
        return result.stdout


def api_file_name(name: str) -> str:
    return _go_file_name('api_' + to_snake_case(name))


def model_file_name(name: str) -> str:
    return _go_file_name('model_' + to_snake_case(name))


def _go_file_name(stem: str) -> str:
    # The Go tool treats *_test.go as test files.
    if stem.endswith('_test'):
        stem += '_gen'
    return stem + '.go'


def _imports(packages: set[str]) -> list[str]:
    if not packages:
        return []
    out = ['import (']
    out += [f'\t"{pkg}"' for pkg in sorted(packages)]
    out += [')', '']
    return out


def _type_imports(types) -> set[str]:
    imports = set()
    for type_name in types:
        if 'time.' in type_name:
            imports.add('time')
        if 'os.' in type_name:
            imports.add('os')
    return imports


def _go_string(value: str) -> str:
    return json.dumps(value)


def _local(name: str) -> str:
    """Escape identifiers that would clash with keywords or generated code."""
    if name in GO_KEYWORDS or name in RESERVED_LOCALS:
        return name + '_'
    return name


def _http_method(verb: str) -> str:
    return 'http.Method' + verb.capitalize()


def _is_nillable(type_name: str) -> bool:
    return type_name.startswith(_NILLABLE_PREFIXES)


def _field_type(prop: Property) -> str:
    if prop.is_model:
        return '*' + prop.type
    if prop.required or _is_nillable(prop.type):
        return prop.type
    return '*' + prop.type


def _struct(name: str, properties: tuple[Property, ...]) -> list[str]:
    out = [f'type {name} struct {{']
    for prop in properties:
        tag = prop.raw_name if prop.required else f'{prop.raw_name},omitempty'
        out.append(f'\t{prop.name} {_field_type(prop)} `json:"{tag}"`')
    out += ['}', '']
    return out


def _accessors(model: str, receiver: str, prop: Property) -> list[str]:
    field_type = _field_type(prop)
    pointer = field_type.startswith('*') and not _is_nillable(prop.type)
    value_type = field_type if prop.is_model else prop.type
    field = f'{receiver}.{prop.name}'

    out = [
        f'// Get{prop.name} returns the {prop.name} field value if set, zero value otherwise.',
        f'func ({receiver} *{model}) Get{prop.name}() (ret {value_type}) {{',
    ]
    if pointer and not prop.is_model:
        out += [
            f'\tif {receiver} == nil || {field} == nil {{',
            '\t\treturn ret',
            '\t}',
            f'\treturn *{field}',
        ]
    else:
        out += [f'\tif {receiver} == nil {{', '\t\treturn ret', '\t}', f'\treturn {field}']
    out += ['}', '']

    if _is_nillable(field_type):
        out += [
            f'// Has{prop.name} reports whether the {prop.name} field has been set.',
            f'func ({receiver} *{model}) Has{prop.name}() bool {{',
            f'\treturn {receiver} != nil && {field} != nil',
            '}',
            '',
        ]

    assign = '&val' if pointer and not prop.is_model else 'val'
    out += [
        f'// Set{prop.name} assigns val to the {prop.name} field.',
        f'func ({receiver} *{model}) Set{prop.name}(val {value_type}) {{',
        f'\t{field} = {assign}',
        '}',
        '',
    ]
    return out


def _setter(call: str, param: Parameter, taken: set[str]) -> list[str]:
    """Chained setter of a query, header or cookie parameter."""
    name = normalize(param.raw_name, True)
    if name in taken:
        name += param.location.value.capitalize()
    taken.add(name)

    arg = _local(param.name)
    key = _go_string(param.raw_name)
    out = [
        f'// {name} sets the {param.location.value} parameter {key}.',
        f'func (c *{call}) {name}({arg} {param.type}) *{call} {{',
    ]

    if param.location is ParameterLocation.QUERY:
        if param.type.startswith('[]'):
            out += [
                f'\tfor _, v := range {arg} {{',
                f'\t\tc.params.Add({key}, fmt.Sprint(v))',
                '\t}',
            ]
        else:
            out.append(f'\tc.params.Set({key}, fmt.Sprint({arg}))')
    elif param.location is ParameterLocation.HEADER:
        out.append(f'\tc.header.Set({key}, fmt.Sprint({arg}))')
    else:
        out.append(
            f'\tc.header.Add("Cookie", (&http.Cookie{{Name: {key}, Value: fmt.Sprint({arg})}}).String())'
        )

    out += ['\treturn c', '}', '']
    return out


def _path_expression(method: Method) -> str:
    """Go expression of the request path with placeholders substituted."""
    params = {p.raw_name: p for p in method.path_params}
    parts = []
    last = 0
    literal = ''
    for match in PLACEHOLDER.finditer(method.path):
        param = params.get(match.group(1))
        if param is None:
            # Unmatched placeholders stay in the path as written.
            continue
        literal += method.path[last:match.start()]
        if literal:
            parts.append(_go_string(literal))
            literal = ''
        parts.append(f'url.PathEscape(fmt.Sprint(c.{_local(param.name)}))')
        last = match.end()
    literal += method.path[last:]
    if literal or not parts:
        parts.append(_go_string(literal))
    return ' + '.join(parts)


def write_files(
    files: dict[str, str], output: str | Path | UPath, clean: bool = False
) -> list[str]:
    """Write generated files into ``output``.

    Args:
        files: Mapping of file name to source.
        output: Target directory, created if missing. Any ``universal_pathlib``
            location is accepted.
        clean: Remove previously generated ``.go`` files (those carrying the
            generated-code header) first.

    Returns:
        The written paths, sorted.

    Raises:
        OutputError: The directory or a file could not be written.
    """
    output_dir = UPath(output)
    written = []
    try:
        if output_dir.exists() and not output_dir.is_dir():
            raise NotADirectoryError(f'Not a directory: {output_dir}')
        output_dir.mkdir(parents=True, exist_ok=True)

        if clean:
            for path in output_dir.glob('*.go'):
                if _is_generated(path):
                    logger.debug(f'Removing {path}')
                    path.unlink()

        for filename in sorted(files):
            path = output_dir / filename
            path.write_text(files[filename], encoding='utf-8')
            written.append(str(path))
    except OSError as e:
        raise OutputError(str(output_dir), cause=e)
    return written


def _is_generated(path: UPath) -> bool:
    text = path.read_text(encoding='utf-8')
    return _GENERATED_MARKER.search(text) is not None
