# CUDA -> HIP rename data (identifiers, headers, device functions)
from hipify.engine.tables import ApiType, ConvType, RenameEntry, RenameTable, SupportDegree

DRV, RT, BLAS, RAND, DNN, FFT, SPARSE, CPLX = (
    ApiType.DRIVER, ApiType.RUNTIME, ApiType.BLAS, ApiType.RAND,
    ApiType.DNN, ApiType.FFT, ApiType.SPARSE, ApiType.COMPLEX)
FULL, HIP_UNS, ROC_UNS, UNS = (
    SupportDegree.FULL, SupportDegree.HIP_UNSUPPORTED,
    SupportDegree.ROC_UNSUPPORTED, SupportDegree.UNSUPPORTED)
C = ConvType


def _e(hip, type, api=RT, support=FULL, roc=""):
    return RenameEntry(hip, roc, type, api, support)


CUDA_INCLUDES = RenameTable({
    # main headers: first one converted, later ones dropped
    "cuda.h":                     _e("hip/hip_runtime.h", C.INCLUDE_MAIN, DRV),
    "cuda_runtime.h":             _e("hip/hip_runtime.h", C.INCLUDE_MAIN, RT),
    "cublas.h":                   _e("hipblas.h", C.INCLUDE_MAIN, BLAS, roc="rocblas.h"),
    "cublas_v2.h":                _e("hipblas.h", C.INCLUDE_MAIN, BLAS, roc="rocblas.h"),
    "curand.h":                   _e("hiprand.h", C.INCLUDE_MAIN, RAND),
    "curand_kernel.h":            _e("hiprand_kernel.h", C.INCLUDE_MAIN, RAND),
    "cudnn.h":                    _e("hipDNN.h", C.INCLUDE_MAIN, DNN),
    "cufft.h":                    _e("hipfft.h", C.INCLUDE_MAIN, FFT),
    "cuComplex.h":                _e("hip/hip_complex.h", C.INCLUDE_MAIN, CPLX),
    "cusparse.h":                 _e("hipsparse.h", C.INCLUDE_MAIN, SPARSE),
    "cusparse_v2.h":              _e("hipsparse.h", C.INCLUDE_MAIN, SPARSE),
    # secondary headers
    "cuda_runtime_api.h":         _e("hip/hip_runtime_api.h", C.INCLUDE, RT),
    "channel_descriptor.h":       _e("hip/channel_descriptor.h", C.INCLUDE, RT),
    "device_functions.h":         _e("hip/device_functions.h", C.INCLUDE, RT),
    "driver_types.h":             _e("hip/driver_types.h", C.INCLUDE, RT),
    "cuda_fp16.h":                _e("hip/hip_fp16.h", C.INCLUDE, RT),
    "cuda_texture_types.h":       _e("hip/hip_texture_types.h", C.INCLUDE, RT),
    "vector_types.h":             _e("hip/hip_vector_types.h", C.INCLUDE, RT),
    "cuda_profiler_api.h":        _e("hip/hip_profile.h", C.INCLUDE, RT),
    "device_launch_parameters.h": _e("", C.INCLUDE, RT),
    "curand_discrete.h":          _e("hiprand_kernel.h", C.INCLUDE, RAND),
    "curand_discrete2.h":         _e("hiprand_kernel.h", C.INCLUDE, RAND),
    "curand_mtgp32_host.h":       _e("hiprand_mtgp32_host.h", C.INCLUDE, RAND),
    "curand_normal.h":            _e("hiprand_kernel.h", C.INCLUDE, RAND),
    "curand_uniform.h":           _e("hiprand_kernel.h", C.INCLUDE, RAND),
    "cufftXt.h":                  _e("hipfftXt.h", C.INCLUDE, FFT, UNS),
    "cuda_gl_interop.h":          _e("hip/hip_gl_interop.h", C.INCLUDE, RT, UNS),
    "cudaGL.h":                   _e("", C.INCLUDE, DRV, UNS),
    "cusolverDn.h":               _e("hipsolver.h", C.INCLUDE, RT, UNS),
}, name="includes")


CUDA_RENAMES = RenameTable({
    # driver
    "CUresult":                   _e("hipError_t", C.TYPE, DRV),
    "CUdevice":                   _e("hipDevice_t", C.TYPE, DRV),
    "CUcontext":                  _e("hipCtx_t", C.TYPE, DRV),
    "CUmodule":                   _e("hipModule_t", C.TYPE, DRV),
    "CUfunction":                 _e("hipFunction_t", C.TYPE, DRV),
    "CUdeviceptr":                _e("hipDeviceptr_t", C.TYPE, DRV),
    "CUstream":                   _e("hipStream_t", C.TYPE, DRV),
    "CUDA_SUCCESS":               _e("hipSuccess", C.TYPE, DRV),
    "cuInit":                     _e("hipInit", C.INIT, DRV),
    "cuDriverGetVersion":         _e("hipDriverGetVersion", C.VERSION, DRV),
    "cuDeviceGet":                _e("hipDeviceGet", C.DEVICE, DRV),
    "cuDeviceGetCount":           _e("hipGetDeviceCount", C.DEVICE, DRV),
    "cuDeviceGetName":            _e("hipDeviceGetName", C.DEVICE, DRV),
    "cuCtxCreate":                _e("hipCtxCreate", C.DEVICE, DRV),
    "cuCtxDestroy":               _e("hipCtxDestroy", C.DEVICE, DRV),
    "cuCtxSynchronize":           _e("hipCtxSynchronize", C.DEVICE, DRV),
    "cuModuleLoad":               _e("hipModuleLoad", C.EXECUTION, DRV),
    "cuModuleLoadData":           _e("hipModuleLoadData", C.EXECUTION, DRV),
    "cuModuleGetFunction":        _e("hipModuleGetFunction", C.EXECUTION, DRV),
    "cuModuleUnload":             _e("hipModuleUnload", C.EXECUTION, DRV),
    "cuLaunchKernel":             _e("hipModuleLaunchKernel", C.EXECUTION, DRV),
    "cuMemAlloc":                 _e("hipMalloc", C.MEMORY, DRV),
    "cuMemFree":                  _e("hipFree", C.MEMORY, DRV),
    "cuMemcpyHtoD":               _e("hipMemcpyHtoD", C.MEMORY, DRV),
    "cuMemcpyDtoH":               _e("hipMemcpyDtoH", C.MEMORY, DRV),
    "cuGLInit":                   _e("hipGLInit", C.DEVICE, DRV, UNS),
    "cuGraphicsGLRegisterBuffer": _e("hipGraphicsGLRegisterBuffer", C.MEMORY, DRV, UNS),
    # runtime: errors
    "cudaError_t":                _e("hipError_t", C.TYPE),
    "cudaError":                  _e("hipError_t", C.TYPE),
    "cudaSuccess":                _e("hipSuccess", C.ERROR),
    "cudaErrorMemoryAllocation":  _e("hipErrorOutOfMemory", C.ERROR),
    "cudaErrorInvalidValue":      _e("hipErrorInvalidValue", C.ERROR),
    "cudaErrorNotReady":          _e("hipErrorNotReady", C.ERROR),
    "cudaGetLastError":           _e("hipGetLastError", C.ERROR),
    "cudaPeekAtLastError":        _e("hipPeekAtLastError", C.ERROR),
    "cudaGetErrorString":         _e("hipGetErrorString", C.ERROR),
    "cudaGetErrorName":           _e("hipGetErrorName", C.ERROR),
    # runtime: device
    "cudaDeviceProp":             _e("hipDeviceProp_t", C.TYPE),
    "cudaSetDevice":              _e("hipSetDevice", C.DEVICE),
    "cudaGetDevice":              _e("hipGetDevice", C.DEVICE),
    "cudaGetDeviceCount":         _e("hipGetDeviceCount", C.DEVICE),
    "cudaGetDeviceProperties":    _e("hipGetDeviceProperties", C.DEVICE),
    "cudaDeviceSynchronize":      _e("hipDeviceSynchronize", C.DEVICE),
    "cudaDeviceReset":            _e("hipDeviceReset", C.DEVICE),
    "cudaDeviceGetAttribute":     _e("hipDeviceGetAttribute", C.DEVICE),
    "cudaThreadSynchronize":      _e("hipDeviceSynchronize", C.THREAD),
    "cudaThreadExit":             _e("hipDeviceReset", C.THREAD),
    "cudaDeviceSetCacheConfig":   _e("hipDeviceSetCacheConfig", C.DEVICE),
    "cudaDeviceGetNvSciSyncAttributes": _e("hipDeviceGetNvSciSyncAttributes", C.DEVICE, RT, UNS),
    "cudaDriverGetVersion":       _e("hipDriverGetVersion", C.VERSION),
    "cudaRuntimeGetVersion":      _e("hipRuntimeGetVersion", C.VERSION),
    # runtime: memory
    "cudaMalloc":                 _e("hipMalloc", C.MEMORY),
    "cudaMallocHost":             _e("hipHostMalloc", C.MEMORY),
    "cudaHostAlloc":              _e("hipHostMalloc", C.MEMORY),
    "cudaMallocManaged":          _e("hipMallocManaged", C.MEMORY),
    "cudaMallocPitch":            _e("hipMallocPitch", C.MEMORY),
    "cudaMallocArray":            _e("hipMallocArray", C.MEMORY),
    "cudaFree":                   _e("hipFree", C.MEMORY),
    "cudaFreeHost":               _e("hipHostFree", C.MEMORY),
    "cudaFreeArray":              _e("hipFreeArray", C.MEMORY),
    "cudaMemcpy":                 _e("hipMemcpy", C.MEMORY),
    "cudaMemcpyAsync":            _e("hipMemcpyAsync", C.MEMORY),
    "cudaMemcpy2D":               _e("hipMemcpy2D", C.MEMORY),
    "cudaMemcpyToSymbol":         _e("hipMemcpyToSymbol", C.MEMORY),
    "cudaMemcpyFromSymbol":       _e("hipMemcpyFromSymbol", C.MEMORY),
    "cudaMemset":                 _e("hipMemset", C.MEMORY),
    "cudaMemsetAsync":            _e("hipMemsetAsync", C.MEMORY),
    "cudaMemGetInfo":             _e("hipMemGetInfo", C.MEMORY),
    "cudaMemcpyKind":             _e("hipMemcpyKind", C.MEMORY),
    "cudaMemcpyHostToHost":       _e("hipMemcpyHostToHost", C.MEMORY),
    "cudaMemcpyHostToDevice":     _e("hipMemcpyHostToDevice", C.MEMORY),
    "cudaMemcpyDeviceToHost":     _e("hipMemcpyDeviceToHost", C.MEMORY),
    "cudaMemcpyDeviceToDevice":   _e("hipMemcpyDeviceToDevice", C.MEMORY),
    "cudaMemcpyDefault":          _e("hipMemcpyDefault", C.MEMORY),
    "cudaHostAllocDefault":       _e("hipHostMallocDefault", C.MEMORY),
    "cudaHostRegister":           _e("hipHostRegister", C.MEMORY),
    "cudaHostUnregister":         _e("hipHostUnregister", C.MEMORY),
    "cudaMemAdvise":              _e("hipMemAdvise", C.MEMORY, RT, HIP_UNS),
    "cudaMemPrefetchAsync":       _e("hipMemPrefetchAsync", C.MEMORY, RT, HIP_UNS),
    "cudaArray":                  _e("hipArray", C.MEMORY),
    "cudaChannelFormatDesc":      _e("hipChannelFormatDesc", C.TEXTURE),
    "cudaCreateChannelDesc":      _e("hipCreateChannelDesc", C.TEXTURE),
    "cudaTextureObject_t":        _e("hipTextureObject_t", C.TEXTURE),
    "cudaResourceDesc":           _e("hipResourceDesc", C.TEXTURE),
    "cudaTextureDesc":            _e("hipTextureDesc", C.TEXTURE),
    "cudaCreateTextureObject":    _e("hipCreateTextureObject", C.TEXTURE),
    "cudaDestroyTextureObject":   _e("hipDestroyTextureObject", C.TEXTURE),
    # runtime: streams and events
    "cudaStream_t":               _e("hipStream_t", C.TYPE),
    "cudaStreamCreate":           _e("hipStreamCreate", C.STREAM),
    "cudaStreamCreateWithFlags":  _e("hipStreamCreateWithFlags", C.STREAM),
    "cudaStreamDestroy":          _e("hipStreamDestroy", C.STREAM),
    "cudaStreamSynchronize":      _e("hipStreamSynchronize", C.STREAM),
    "cudaStreamWaitEvent":        _e("hipStreamWaitEvent", C.STREAM),
    "cudaStreamQuery":            _e("hipStreamQuery", C.STREAM),
    "cudaStreamNonBlocking":      _e("hipStreamNonBlocking", C.STREAM),
    "cudaStreamDefault":          _e("hipStreamDefault", C.STREAM),
    "cudaStreamAttachMemAsync":   _e("hipStreamAttachMemAsync", C.STREAM, RT, HIP_UNS),
    "cudaEvent_t":                _e("hipEvent_t", C.TYPE),
    "cudaEventCreate":            _e("hipEventCreate", C.EVENT),
    "cudaEventCreateWithFlags":   _e("hipEventCreateWithFlags", C.EVENT),
    "cudaEventRecord":            _e("hipEventRecord", C.EVENT),
    "cudaEventSynchronize":       _e("hipEventSynchronize", C.EVENT),
    "cudaEventElapsedTime":       _e("hipEventElapsedTime", C.EVENT),
    "cudaEventDestroy":           _e("hipEventDestroy", C.EVENT),
    "cudaEventQuery":             _e("hipEventQuery", C.EVENT),
    "cudaEventDisableTiming":     _e("hipEventDisableTiming", C.EVENT),
    # runtime: execution
    "cudaLaunchKernel":           _e("hipLaunchKernel", C.EXECUTION),
    "cudaFuncSetCacheConfig":     _e("hipFuncSetCacheConfig", C.EXECUTION),
    "cudaFuncGetAttributes":      _e("hipFuncGetAttributes", C.EXECUTION),
    "cudaFuncAttributes":         _e("hipFuncAttributes", C.EXECUTION),
    "cudaFuncCachePreferShared":  _e("hipFuncCachePreferShared", C.EXECUTION),
    "cudaFuncCachePreferL1":      _e("hipFuncCachePreferL1", C.EXECUTION),
    "cudaConfigureCall":          _e("hipConfigureCall", C.EXECUTION, RT, UNS),
    "cudaSetupArgument":          _e("hipSetupArgument", C.EXECUTION, RT, UNS),
    "cudaLaunchCooperativeKernelMultiDevice": _e("hipLaunchCooperativeKernelMultiDevice", C.EXECUTION, RT, HIP_UNS),
    "cudaProfilerStart":          _e("hipProfilerStart", C.OTHER),
    "cudaProfilerStop":           _e("hipProfilerStop", C.OTHER),
    "cudaProfilerInitialize":     _e("hipProfilerInitialize", C.OTHER, RT, UNS),
    "cudaGraphicsGLRegisterBuffer": _e("hipGraphicsGLRegisterBuffer", C.MEMORY, RT, UNS),
    "CUDART_VERSION":             _e("HIP_VERSION", C.VERSION),
    # BLAS
    "cublasHandle_t":             _e("hipblasHandle_t", C.TYPE, BLAS, roc="rocblas_handle"),
    "cublasStatus_t":             _e("hipblasStatus_t", C.TYPE, BLAS, roc="rocblas_status"),
    "cublasOperation_t":          _e("hipblasOperation_t", C.TYPE, BLAS, roc="rocblas_operation"),
    "CUBLAS_STATUS_SUCCESS":      _e("HIPBLAS_STATUS_SUCCESS", C.NUMERIC_LITERAL, BLAS, roc="rocblas_status_success"),
    "CUBLAS_OP_N":                _e("HIPBLAS_OP_N", C.NUMERIC_LITERAL, BLAS, roc="rocblas_operation_none"),
    "CUBLAS_OP_T":                _e("HIPBLAS_OP_T", C.NUMERIC_LITERAL, BLAS, roc="rocblas_operation_transpose"),
    "CUBLAS_OP_C":                _e("HIPBLAS_OP_C", C.NUMERIC_LITERAL, BLAS, roc="rocblas_operation_conjugate_transpose"),
    "cublasCreate":               _e("hipblasCreate", C.OTHER, BLAS, roc="rocblas_create_handle"),
    "cublasCreate_v2":            _e("hipblasCreate", C.OTHER, BLAS, roc="rocblas_create_handle"),
    "cublasDestroy":              _e("hipblasDestroy", C.OTHER, BLAS, roc="rocblas_destroy_handle"),
    "cublasDestroy_v2":           _e("hipblasDestroy", C.OTHER, BLAS, roc="rocblas_destroy_handle"),
    "cublasSetStream":            _e("hipblasSetStream", C.STREAM, BLAS, roc="rocblas_set_stream"),
    "cublasSgemm":                _e("hipblasSgemm", C.OTHER, BLAS, roc="rocblas_sgemm"),
    "cublasDgemm":                _e("hipblasDgemm", C.OTHER, BLAS, roc="rocblas_dgemm"),
    "cublasSaxpy":                _e("hipblasSaxpy", C.OTHER, BLAS, roc="rocblas_saxpy"),
    "cublasDaxpy":                _e("hipblasDaxpy", C.OTHER, BLAS, roc="rocblas_daxpy"),
    "cublasSdot":                 _e("hipblasSdot", C.OTHER, BLAS, roc="rocblas_sdot"),
    "cublasSscal":                _e("hipblasSscal", C.OTHER, BLAS, roc="rocblas_sscal"),
    "cublasSetMatrix":            _e("hipblasSetMatrix", C.MEMORY, BLAS, roc="rocblas_set_matrix"),
    "cublasGetMatrix":            _e("hipblasGetMatrix", C.MEMORY, BLAS, roc="rocblas_get_matrix"),
    "cublasSgemmBatched":         _e("hipblasSgemmBatched", C.OTHER, BLAS, roc="rocblas_sgemm_batched"),
    "cublasSgelsBatched":         _e("hipblasSgelsBatched", C.OTHER, BLAS, ROC_UNS, roc="rocblas_sgels_batched"),
    "cublasSetMathMode":          _e("hipblasSetMathMode", C.OTHER, BLAS, HIP_UNS, roc="rocblas_set_math_mode"),
    "cublasXtCreate":             _e("hipblasXtCreate", C.OTHER, BLAS, UNS),
    # RAND
    "curandGenerator_t":          _e("hiprandGenerator_t", C.TYPE, RAND),
    "curandStatus_t":             _e("hiprandStatus_t", C.TYPE, RAND),
    "curandState":                _e("hiprandState", C.TYPE, RAND),
    "curandState_t":              _e("hiprandState_t", C.TYPE, RAND),
    "curandStatePhilox4_32_10_t": _e("hiprandStatePhilox4_32_10_t", C.TYPE, RAND),
    "CURAND_STATUS_SUCCESS":      _e("HIPRAND_STATUS_SUCCESS", C.NUMERIC_LITERAL, RAND),
    "CURAND_RNG_PSEUDO_DEFAULT":  _e("HIPRAND_RNG_PSEUDO_DEFAULT", C.NUMERIC_LITERAL, RAND),
    "curandCreateGenerator":      _e("hiprandCreateGenerator", C.OTHER, RAND),
    "curandDestroyGenerator":     _e("hiprandDestroyGenerator", C.OTHER, RAND),
    "curandSetPseudoRandomGeneratorSeed": _e("hiprandSetPseudoRandomGeneratorSeed", C.OTHER, RAND),
    "curandGenerateUniform":      _e("hiprandGenerateUniform", C.OTHER, RAND),
    "curandGenerateNormal":       _e("hiprandGenerateNormal", C.OTHER, RAND),
    "curand_init":                _e("hiprand_init", C.DEVICE_FUNC, RAND),
    "curand":                     _e("hiprand", C.DEVICE_FUNC, RAND),
    "curand_uniform":             _e("hiprand_uniform", C.DEVICE_FUNC, RAND),
    "curand_normal":              _e("hiprand_normal", C.DEVICE_FUNC, RAND),
    "curandSetGeneratorOrdering": _e("hiprandSetGeneratorOrdering", C.OTHER, RAND, UNS),
    # DNN
    "cudnnHandle_t":              _e("hipdnnHandle_t", C.TYPE, DNN),
    "cudnnStatus_t":              _e("hipdnnStatus_t", C.TYPE, DNN),
    "cudnnTensorDescriptor_t":    _e("hipdnnTensorDescriptor_t", C.TYPE, DNN),
    "CUDNN_STATUS_SUCCESS":       _e("HIPDNN_STATUS_SUCCESS", C.NUMERIC_LITERAL, DNN),
    "cudnnCreate":                _e("hipdnnCreate", C.OTHER, DNN),
    "cudnnDestroy":               _e("hipdnnDestroy", C.OTHER, DNN),
    "cudnnCreateTensorDescriptor": _e("hipdnnCreateTensorDescriptor", C.OTHER, DNN),
    "cudnnSetStream":             _e("hipdnnSetStream", C.STREAM, DNN),
    "cudnnCTCLoss":               _e("hipdnnCTCLoss", C.OTHER, DNN, UNS),
    # FFT
    "cufftHandle":                _e("hipfftHandle", C.TYPE, FFT),
    "cufftResult":                _e("hipfftResult", C.TYPE, FFT),
    "cufftComplex":               _e("hipfftComplex", C.TYPE, FFT),
    "cufftReal":                  _e("hipfftReal", C.TYPE, FFT),
    "CUFFT_SUCCESS":              _e("HIPFFT_SUCCESS", C.NUMERIC_LITERAL, FFT),
    "CUFFT_FORWARD":              _e("HIPFFT_FORWARD", C.NUMERIC_LITERAL, FFT),
    "CUFFT_INVERSE":              _e("HIPFFT_BACKWARD", C.NUMERIC_LITERAL, FFT),
    "CUFFT_C2C":                  _e("HIPFFT_C2C", C.NUMERIC_LITERAL, FFT),
    "CUFFT_R2C":                  _e("HIPFFT_R2C", C.NUMERIC_LITERAL, FFT),
    "cufftPlan1d":                _e("hipfftPlan1d", C.OTHER, FFT),
    "cufftPlan2d":                _e("hipfftPlan2d", C.OTHER, FFT),
    "cufftExecC2C":               _e("hipfftExecC2C", C.OTHER, FFT),
    "cufftExecR2C":               _e("hipfftExecR2C", C.OTHER, FFT),
    "cufftDestroy":               _e("hipfftDestroy", C.OTHER, FFT),
    "cufftSetStream":             _e("hipfftSetStream", C.STREAM, FFT),
    "cufftXtMalloc":              _e("hipfftXtMalloc", C.MEMORY, FFT, UNS),
    # complex
    "cuComplex":                  _e("hipComplex", C.TYPE, CPLX),
    "cuFloatComplex":             _e("hipFloatComplex", C.TYPE, CPLX),
    "cuDoubleComplex":            _e("hipDoubleComplex", C.TYPE, CPLX),
    "make_cuComplex":             _e("make_hipComplex", C.OTHER, CPLX),
    "make_cuFloatComplex":        _e("make_hipFloatComplex", C.OTHER, CPLX),
    "make_cuDoubleComplex":       _e("make_hipDoubleComplex", C.OTHER, CPLX),
    "cuCrealf":                   _e("hipCrealf", C.OTHER, CPLX),
    "cuCimagf":                   _e("hipCimagf", C.OTHER, CPLX),
    "cuCaddf":                    _e("hipCaddf", C.OTHER, CPLX),
    "cuCmulf":                    _e("hipCmulf", C.OTHER, CPLX),
    "cuCabsf":                    _e("hipCabsf", C.OTHER, CPLX),
    "cuConjf":                    _e("hipConjf", C.OTHER, CPLX),
    # sparse
    "cusparseHandle_t":           _e("hipsparseHandle_t", C.TYPE, SPARSE),
    "cusparseStatus_t":           _e("hipsparseStatus_t", C.TYPE, SPARSE),
    "cusparseMatDescr_t":         _e("hipsparseMatDescr_t", C.TYPE, SPARSE),
    "CUSPARSE_STATUS_SUCCESS":    _e("HIPSPARSE_STATUS_SUCCESS", C.NUMERIC_LITERAL, SPARSE),
    "cusparseCreate":             _e("hipsparseCreate", C.OTHER, SPARSE),
    "cusparseDestroy":            _e("hipsparseDestroy", C.OTHER, SPARSE),
    "cusparseCreateMatDescr":     _e("hipsparseCreateMatDescr", C.OTHER, SPARSE),
    "cusparseScsrmv":             _e("hipsparseScsrmv", C.OTHER, SPARSE),
    "cusparseSetStream":          _e("hipsparseSetStream", C.STREAM, SPARSE),
    "cusparseCsr2cscEx2":         _e("hipsparseCsr2cscEx2", C.OTHER, SPARSE, UNS),
}, name="renames")


# callees of device-side calls; only consulted for __device__/__global__ callees
CUDA_DEVICE_FUNCTIONS = RenameTable({
    "__syncthreads":              _e("__syncthreads", C.DEVICE_FUNC),
    "__threadfence":              _e("__threadfence", C.DEVICE_FUNC),
    "__threadfence_block":        _e("__threadfence_block", C.DEVICE_FUNC),
    "__threadfence_system":       _e("__threadfence_system", C.DEVICE_FUNC),
    "__syncthreads_count":        _e("__syncthreads_count", C.DEVICE_FUNC),
    "__syncthreads_and":          _e("__syncthreads_and", C.DEVICE_FUNC),
    "__syncthreads_or":           _e("__syncthreads_or", C.DEVICE_FUNC),
    "__ldg":                      _e("__ldg", C.DEVICE_FUNC),
    "__fdividef":                 _e("__fdividef", C.MATH_FUNC),
    "__saturatef":                _e("__saturatef", C.MATH_FUNC),
    "__umulhi":                   _e("__umulhi", C.MATH_FUNC),
    "__mul24":                    _e("__mul24", C.MATH_FUNC),
    "__brev":                     _e("__brev", C.MATH_FUNC),
    "__popc":                     _e("__popc", C.MATH_FUNC),
    "__clz":                      _e("__clz", C.MATH_FUNC),
    "__ffs":                      _e("__ffs", C.MATH_FUNC),
    "atomicAdd":                  _e("atomicAdd", C.DEVICE_FUNC),
    "atomicCAS":                  _e("atomicCAS", C.DEVICE_FUNC),
    "atomicExch":                 _e("atomicExch", C.DEVICE_FUNC),
    "atomicAdd_system":           _e("atomicAdd_system", C.DEVICE_FUNC, RT, HIP_UNS),
    "__shfl":                     _e("__shfl", C.DEVICE_FUNC),
    "__shfl_up":                  _e("__shfl_up", C.DEVICE_FUNC),
    "__shfl_down":                _e("__shfl_down", C.DEVICE_FUNC),
    "__shfl_xor":                 _e("__shfl_xor", C.DEVICE_FUNC),
    "__shfl_sync":                _e("__shfl", C.DEVICE_FUNC, RT, HIP_UNS),
    "__ballot_sync":              _e("__ballot", C.DEVICE_FUNC, RT, HIP_UNS),
    "__syncwarp":                 _e("__syncwarp", C.DEVICE_FUNC, RT, UNS),
    "__activemask":               _e("__activemask", C.DEVICE_FUNC, RT, UNS),
    "__nanosleep":                _e("__nanosleep", C.DEVICE_FUNC, RT, UNS),
    "__prof_trigger":             _e("__prof_trigger", C.DEVICE_FUNC, RT, UNS),
    "__trap":                     _e("abort", C.DEVICE_FUNC),
    "__brkpt":                    _e("__brkpt", C.DEVICE_FUNC, RT, UNS),
}, name="device functions")


# what the CUDA headers declare for those callees, as the parser would see it
CUDA_DEVICE_DECLARATIONS = dict(
    {name: frozenset({"device"}) for name in CUDA_DEVICE_FUNCTIONS},
    **{name: frozenset({"host", "device"}) for name in (
        "sqrtf", "sinf", "cosf", "expf", "logf", "fabsf", "powf", "fminf", "fmaxf",
        "sqrt", "sin", "cos", "exp", "log", "fabs", "pow", "min", "max")})
