"""Synthesis of matcher class trees from matcher specs."""

from __future__ import annotations

from typing import List, Optional, Tuple

from ..models import (
    ArrayType,
    DeclaredType,
    GeneratedUnit,
    MatcherSpec,
    PrimitiveType,
    PropertyDescriptor,
    TypeRef,
    TypeVariable,
    VoidType,
    WildcardType,
)
from .printer import JavaPrinter
from .tree import (
    OBJECT,
    AnnotationDef,
    ArrayTypeName,
    Assignment,
    BOOLEAN,
    ClassLiteral,
    ClassName,
    CompilationUnit,
    ExpressionStatement,
    FieldDef,
    MethodCall,
    MethodDef,
    Modifier,
    Name,
    NewInstance,
    Parameter,
    ParameterizedTypeName,
    PrimitiveTypeName,
    Return,
    StaticCall,
    StringLiteral,
    This,
    TypeDef,
    TypeName,
    WildcardTypeName,
    raw_type,
)

GENERATED = ClassName.of("javax.annotation.processing", "Generated")
OVERRIDE = ClassName.of("java.lang", "Override")
MATCHER = ClassName.of("org.hamcrest", "Matcher")
MATCHERS = ClassName.of("org.hamcrest", "Matchers")
DESCRIPTION = ClassName.of("org.hamcrest", "Description")
TYPE_SAFE_MATCHER = ClassName.of("org.hamcrest", "TypeSafeMatcher")
BEAN_PROPERTY_MATCHER = ClassName.of(
    "io.github.marmer.testutils.generators.beanmatcher.dependencies", "BeanPropertyMatcher"
)

BUILDER_FIELD = "beanPropertyMatcher"
ITEM = "item"
DESCRIPTION_PARAMETER = "description"


def type_name_of(ref: TypeRef, *, in_argument: bool = False) -> TypeName:
    """Convert a declaration type into a printable type name.

    Type variables are out of scope inside the generated (non-generic) matcher
    and are erased: to ``Object`` at the top level, to ``?`` as a type argument.
    """
    if isinstance(ref, PrimitiveType):
        return PrimitiveTypeName(ref.kind.value)
    if isinstance(ref, TypeVariable):
        return WildcardTypeName() if in_argument else OBJECT
    if isinstance(ref, DeclaredType):
        raw = ClassName(ref.package, ref.simple_names)
        if not ref.arguments:
            return raw
        arguments = tuple(type_name_of(argument, in_argument=True) for argument in ref.arguments)
        return ParameterizedTypeName(raw, arguments)
    if isinstance(ref, ArrayType):
        return ArrayTypeName(type_name_of(ref.component))
    if isinstance(ref, WildcardType):
        if ref.upper_bound is not None and not isinstance(ref.upper_bound, TypeVariable):
            return WildcardTypeName(upper_bound=type_name_of(ref.upper_bound))
        if ref.lower_bound is not None and not isinstance(ref.lower_bound, TypeVariable):
            return WildcardTypeName(lower_bound=type_name_of(ref.lower_bound))
        return WildcardTypeName()
    if isinstance(ref, VoidType):
        raise ValueError("void is not a property type")
    raise TypeError(f"Unsupported type reference: {ref!r}")


def capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


class MatcherTypeFactory:
    """Builds the class tree for a :class:`MatcherSpec` and its nested specs."""

    def type_def(self, spec: MatcherSpec, *, nested: bool = False) -> TypeDef:
        target = spec.target
        self_type = self._matcher_class(spec)
        target_type = self._target_type(spec)
        builder_type = ParameterizedTypeName(BEAN_PROPERTY_MATCHER, (target_type,))

        methods: List[MethodDef] = [self._constructor(spec, builder_type)]
        for prop in spec.properties:
            methods.extend(self._property_methods(prop, self_type))
        methods.extend(self._matcher_methods(target_type))
        methods.append(self._factory(target.simple_name, self_type))

        modifiers: Tuple[Modifier, ...] = (Modifier.PUBLIC,)
        if nested:
            modifiers += (Modifier.STATIC,)
        return TypeDef(
            name=spec.matcher_name,
            modifiers=modifiers,
            annotations=(self._generated(spec),),
            superclass=ParameterizedTypeName(TYPE_SAFE_MATCHER, (target_type,)),
            fields=(FieldDef(builder_type, BUILDER_FIELD, (Modifier.PRIVATE, Modifier.FINAL)),),
            methods=tuple(methods),
            types=tuple(self.type_def(child, nested=True) for child in spec.nested),
            originating_elements=tuple(spec.originating_elements),
        )

    def _matcher_class(self, spec: MatcherSpec) -> ClassName:
        names = tuple(f"{name}Matcher" for name in spec.target.simple_names)
        return ClassName(spec.target.package, names)

    def _target_type(self, spec: MatcherSpec) -> TypeName:
        raw = ClassName(spec.target.package, spec.target.simple_names)
        if not spec.target.type_parameters:
            return raw
        wildcards = tuple(WildcardTypeName() for _ in spec.target.type_parameters)
        return ParameterizedTypeName(raw, wildcards)

    def _generated(self, spec: MatcherSpec) -> AnnotationDef:
        return AnnotationDef(
            GENERATED,
            (
                ("value", StringLiteral(spec.marker.generator_id)),
                ("date", StringLiteral(spec.marker.timestamp)),
            ),
        )

    def _constructor(self, spec: MatcherSpec, builder_type: TypeName) -> MethodDef:
        raw = ClassName(spec.target.package, spec.target.simple_names)
        return MethodDef(
            name=spec.matcher_name,
            constructor=True,
            modifiers=(Modifier.PUBLIC,),
            body=(Assignment(Name(BUILDER_FIELD), NewInstance(builder_type, (ClassLiteral(raw),))),),
        )

    def _property_methods(self, prop: PropertyDescriptor, self_type: ClassName) -> List[MethodDef]:
        method_name = f"with{capitalize(prop.name)}"
        declared = type_name_of(prop.type)
        matcher_type = ParameterizedTypeName(
            MATCHER, (WildcardTypeName.supertype_of(type_name_of(prop.boxed_type)),)
        )
        methods = [
            MethodDef(
                name=method_name,
                modifiers=(Modifier.PUBLIC,),
                parameters=(Parameter(matcher_type, "matcher"),),
                body=(
                    ExpressionStatement(
                        MethodCall(Name(BUILDER_FIELD), "with", (StringLiteral(prop.name), Name("matcher")))
                    ),
                    Return(This()),
                ),
                returns=self_type,
            )
        ]
        # Both overloads would erase to the same signature.
        if raw_type(declared) != MATCHER:
            equal_to = StaticCall(MATCHERS, "equalTo", (Name("value"),))
            methods.append(
                MethodDef(
                    name=method_name,
                    modifiers=(Modifier.PUBLIC,),
                    parameters=(Parameter(declared, "value"),),
                    body=(
                        ExpressionStatement(
                            MethodCall(Name(BUILDER_FIELD), "with", (StringLiteral(prop.name), equal_to))
                        ),
                        Return(This()),
                    ),
                    returns=self_type,
                )
            )
        return methods

    def _matcher_methods(self, target_type: TypeName) -> List[MethodDef]:
        override = (AnnotationDef(OVERRIDE),)
        item = Parameter(target_type, ITEM)
        description = Parameter(DESCRIPTION, DESCRIPTION_PARAMETER)
        builder = Name(BUILDER_FIELD)
        return [
            MethodDef(
                name="describeTo",
                modifiers=(Modifier.PUBLIC,),
                annotations=override,
                parameters=(description,),
                body=(ExpressionStatement(MethodCall(builder, "describeTo", (Name(DESCRIPTION_PARAMETER),))),),
            ),
            MethodDef(
                name="matchesSafely",
                modifiers=(Modifier.PROTECTED,),
                annotations=override,
                parameters=(item,),
                body=(Return(MethodCall(builder, "matches", (Name(ITEM),))),),
                returns=BOOLEAN,
            ),
            MethodDef(
                name="describeMismatchSafely",
                modifiers=(Modifier.PROTECTED,),
                annotations=override,
                parameters=(item, description),
                body=(
                    ExpressionStatement(
                        MethodCall(builder, "describeMismatch", (Name(ITEM), Name(DESCRIPTION_PARAMETER)))
                    ),
                ),
            ),
        ]

    def _factory(self, simple_name: str, self_type: ClassName) -> MethodDef:
        return MethodDef(
            name=f"is{simple_name}",
            modifiers=(Modifier.PUBLIC, Modifier.STATIC),
            body=(Return(NewInstance(self_type)),),
            returns=self_type,
        )


class MatcherCodeEmitter:
    """Turns a matcher spec into a printed, self-describing generated unit."""

    def __init__(
        self,
        printer: Optional[JavaPrinter] = None,
        *,
        factory: Optional[MatcherTypeFactory] = None,
        header: Optional[str] = None,
    ) -> None:
        self.printer = printer or JavaPrinter()
        self.factory = factory or MatcherTypeFactory()
        self.header = header

    def emit(self, spec: MatcherSpec) -> GeneratedUnit:
        unit = CompilationUnit(
            package=spec.target.package,
            type=self.factory.type_def(spec),
            header=self.header,
            package_members=frozenset(spec.package_members),
        )
        return GeneratedUnit(
            package=unit.package,
            type_name=unit.type.name,
            source=self.printer.render(unit),
            marker=spec.marker,
            originating_elements=list(unit.originating_elements),
            nested_names=_nested_names(spec),
        )


def _nested_names(spec: MatcherSpec) -> List[str]:
    names: List[str] = []
    for child in spec.nested:
        names.append(child.matcher_qualified_name)
        names.extend(_nested_names(child))
    return names


__all__ = ["MatcherCodeEmitter", "MatcherTypeFactory", "type_name_of"]
